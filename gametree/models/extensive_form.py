"""Editable extensive-form game tree.

The game is an arena: every node, information set, player and outcome of
one game lives in dicts owned by :class:`ExtensiveFormGame` and refers to
the others by integer handle. Handles are never reused, so a handle that
outlived its entity fails the lookup instead of aliasing a new one.

Only the game mutates the records. Callers read them through the
navigation accessors and change them through the editing operations,
each of which validates its arguments before the first write and bumps
:attr:`ExtensiveFormGame.revision` on success.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from itertools import count
from typing import Generic

from gametree.config import TreeConfig
from gametree.models.errors import GameStructureError, InvalidReferenceError
from gametree.models.numbers import AnyNumber, Number, coerce, sums_to_one, zero

CHANCE = 0


class NodeKind(str, Enum):
    TERMINAL = "terminal"
    DECISION = "decision"
    CHANCE = "chance"


@dataclass
class Outcome(Generic[Number]):
    """Payoff vector that can be attached to any number of nodes."""

    id: int
    label: str
    payoffs: dict[int, Number]


@dataclass
class Action(Generic[Number]):
    """One alternative at an information set.

    ``probability`` is only set for actions of the chance player.
    """

    label: str
    probability: Number | None = None


@dataclass
class Infoset:
    """Decision nodes of one player that the player cannot tell apart."""

    id: int
    player: int
    actions: list[Action]
    members: list[int] = field(default_factory=list)
    name: str = ""

    @property
    def num_actions(self) -> int:
        return len(self.actions)


@dataclass
class Player:
    id: int
    name: str
    infosets: list[int] = field(default_factory=list)

    @property
    def is_chance(self) -> bool:
        return self.id == CHANCE


@dataclass
class Node:
    id: int
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    infoset: int | None = None
    outcome: int | None = None
    name: str = ""
    subgame_root: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.infoset is None


@dataclass(frozen=True)
class _CopiedNode:
    name: str
    infoset: int | None
    outcome: int | None
    children: tuple[_CopiedNode, ...]


class ExtensiveFormGame(Generic[Number]):
    """A finite extensive-form game over ``float`` or ``Fraction`` payoffs.

    A new game has the chance player (id 0), one personal player per name
    in ``players`` (ids 1..n) and a single terminal root node.
    """

    def __init__(
        self,
        players: Iterable[str] = (),
        *,
        title: str = "Untitled game",
        number_type: type = float,
    ) -> None:
        if number_type not in (float, Fraction):
            raise GameStructureError(f"Unsupported payoff type: {number_type!r}")
        self.title = title
        self._number_type = number_type
        self._revision = 0
        self._handles = count(1)
        self._nodes: dict[int, Node] = {}
        self._infosets: dict[int, Infoset] = {}
        self._outcomes: dict[int, Outcome[Number]] = {}
        self._players: dict[int, Player] = {
            CHANCE: Player(id=CHANCE, name=TreeConfig.CHANCE_PLAYER_NAME)
        }
        root = self._new_node(None)
        root.subgame_root = True
        self._root = root.id
        for name in players:
            pl = len(self._players)
            self._players[pl] = Player(id=pl, name=name)

    # ------------------------------------------------------------------
    # General information
    # ------------------------------------------------------------------

    @property
    def number_type(self) -> type:
        return self._number_type

    @property
    def revision(self) -> int:
        """Counter bumped by every structural or payoff change.

        Dependent caches compare it with the value they last saw to decide
        whether they must be rebuilt.
        """
        return self._revision

    @property
    def root(self) -> int:
        return self._root

    @property
    def num_players(self) -> int:
        """Number of personal (non-chance) players."""
        return len(self._players) - 1

    def players(self) -> list[Player]:
        return [self._players[pl] for pl in sorted(self._players)]

    def personal_players(self) -> list[Player]:
        return [self._players[pl] for pl in sorted(self._players) if pl != CHANCE]

    def infosets(self) -> list[Infoset]:
        return list(self._infosets.values())

    def outcomes(self) -> list[Outcome[Number]]:
        return list(self._outcomes.values())

    def coerce(self, value: object) -> Number:
        return coerce(value, self._number_type)

    # ------------------------------------------------------------------
    # Handle lookups
    # ------------------------------------------------------------------

    def node(self, node: int) -> Node:
        try:
            return self._nodes[node]
        except (KeyError, TypeError):
            raise InvalidReferenceError("Node", node) from None

    def infoset(self, infoset: int) -> Infoset:
        try:
            return self._infosets[infoset]
        except (KeyError, TypeError):
            raise InvalidReferenceError("Infoset", infoset) from None

    def player(self, player: int) -> Player:
        try:
            return self._players[player]
        except (KeyError, TypeError):
            raise InvalidReferenceError("Player", player) from None

    def outcome(self, outcome: int) -> Outcome[Number]:
        try:
            return self._outcomes[outcome]
        except (KeyError, TypeError):
            raise InvalidReferenceError("Outcome", outcome) from None

    def _personal_player(self, player: int) -> Player:
        pl = self.player(player)
        if pl.is_chance:
            raise GameStructureError("The chance player has no payoffs")
        return pl

    def _decision_node(self, node: int) -> Node:
        n = self.node(node)
        if n.is_terminal:
            raise GameStructureError(f"Node {node} is terminal")
        return n

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def parent(self, node: int) -> int | None:
        return self.node(node).parent

    def children(self, node: int) -> tuple[int, ...]:
        return tuple(self.node(node).children)

    def child(self, node: int, action: int) -> int:
        n = self.node(node)
        if not 0 <= action < len(n.children):
            raise GameStructureError(f"Node {node} has no action {action}")
        return n.children[action]

    def action_index(self, node: int) -> int | None:
        """Index of the action leading into ``node``; None for the root."""
        n = self.node(node)
        if n.parent is None:
            return None
        return self._nodes[n.parent].children.index(node)

    def next_sibling(self, node: int) -> int | None:
        index = self.action_index(node)
        if index is None:
            return None
        siblings = self._nodes[self._nodes[node].parent].children
        return siblings[index + 1] if index + 1 < len(siblings) else None

    def prior_sibling(self, node: int) -> int | None:
        index = self.action_index(node)
        if not index:
            return None
        return self._nodes[self._nodes[node].parent].children[index - 1]

    def next_member(self, node: int) -> int | None:
        """The member after ``node`` in its information set."""
        n = self.node(node)
        if n.infoset is None:
            return None
        members = self._infosets[n.infoset].members
        index = members.index(node)
        return members[index + 1] if index + 1 < len(members) else None

    def prior_member(self, node: int) -> int | None:
        n = self.node(node)
        if n.infoset is None:
            return None
        members = self._infosets[n.infoset].members
        index = members.index(node)
        return members[index - 1] if index > 0 else None

    def node_kind(self, node: int) -> NodeKind:
        n = self.node(node)
        if n.infoset is None:
            return NodeKind.TERMINAL
        if self._infosets[n.infoset].player == CHANCE:
            return NodeKind.CHANCE
        return NodeKind.DECISION

    def player_of(self, node: int) -> int | None:
        n = self.node(node)
        return None if n.infoset is None else self._infosets[n.infoset].player

    def is_predecessor(self, ancestor: int, node: int) -> bool:
        """True if ``ancestor`` lies on the path from the root to ``node`` (inclusive)."""
        self.node(ancestor)
        current: int | None = self.node(node).id
        while current is not None:
            if current == ancestor:
                return True
            current = self._nodes[current].parent
        return False

    def nodes(self, start: int | None = None) -> Iterator[int]:
        """Yield node handles of the subtree at ``start`` (default: root) in preorder."""
        stack = [self._root if start is None else self.node(start).id]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self._nodes[current].children))

    def terminal_nodes(self, start: int | None = None) -> list[int]:
        return [n for n in self.nodes(start) if not self._nodes[n].children]

    def payoff(self, outcome: int) -> dict[int, Number]:
        return dict(self.outcome(outcome).payoffs)

    # ------------------------------------------------------------------
    # Internal construction helpers (no validation, no revision bump)
    # ------------------------------------------------------------------

    def _new_node(self, parent: int | None) -> Node:
        node = Node(id=next(self._handles), parent=parent)
        self._nodes[node.id] = node
        return node

    def _build_actions(self, player: Player, actions: int | Sequence[str]) -> list[Action]:
        if isinstance(actions, int):
            if actions < 1:
                raise GameStructureError("An information set needs at least one action")
            labels = [str(i + 1) for i in range(actions)]
        else:
            labels = [str(label) for label in actions]
            if not labels:
                raise GameStructureError("An information set needs at least one action")
        if player.is_chance:
            prob = self._number_type(1) / len(labels)
            return [Action(label=label, probability=prob) for label in labels]
        return [Action(label=label) for label in labels]

    def _create_infoset(self, player: Player, actions: list[Action], name: str = "") -> Infoset:
        infoset = Infoset(id=next(self._handles), player=player.id, actions=actions, name=name)
        self._infosets[infoset.id] = infoset
        player.infosets.append(infoset.id)
        return infoset

    def _resolve_infoset(
        self, infoset: int | None, player: int | None, actions: int | Sequence[str]
    ) -> tuple[Infoset | None, Player | None, list[Action] | None]:
        """Validate the "existing infoset or fresh one for player" argument pair."""
        if infoset is not None:
            return self.infoset(infoset), None, None
        if player is None:
            raise GameStructureError("Either an information set or a player is required")
        pl = self.player(player)
        return None, pl, self._build_actions(pl, actions)

    def _join(self, node: Node, infoset: Infoset) -> None:
        node.infoset = infoset.id
        infoset.members.append(node.id)

    def _remove_infoset(self, infoset: Infoset) -> None:
        del self._infosets[infoset.id]
        self._players[infoset.player].infosets.remove(infoset.id)

    def _leave_infoset(self, node: Node) -> None:
        if node.infoset is None:
            return
        infoset = self._infosets[node.infoset]
        infoset.members.remove(node.id)
        node.infoset = None
        if not infoset.members:
            self._remove_infoset(infoset)

    def _destroy(self, node: int) -> None:
        """Delete ``node`` and its whole subtree from the arena."""
        for n in list(self.nodes(node)):
            self._leave_infoset(self._nodes[n])
            del self._nodes[n]

    def _clear_below(self, node: Node) -> None:
        for c in node.children:
            self._destroy(c)
        node.children = []
        self._leave_infoset(node)

    def _replace_in_parent(self, old: Node, new: Node) -> None:
        new.parent = old.parent
        if old.parent is None:
            self._root = new.id
            new.subgame_root = True
        else:
            siblings = self._nodes[old.parent].children
            siblings[siblings.index(old.id)] = new.id

    def _commit(self) -> None:
        """Drop subgame marks that the last edit made illegal and bump the revision."""
        for n in self._nodes.values():
            if n.subgame_root and n.id != self._root and not self.is_legal_subgame(n.id):
                n.subgame_root = False
        self._nodes[self._root].subgame_root = True
        self._revision += 1

    # ------------------------------------------------------------------
    # Players and information sets
    # ------------------------------------------------------------------

    def new_player(self, name: str) -> int:
        """Add a personal player; existing outcomes pay it zero."""
        player = Player(id=len(self._players), name=name)
        self._players[player.id] = player
        for outcome in self._outcomes.values():
            outcome.payoffs[player.id] = zero(self._number_type)
        self._commit()
        return player.id

    def new_infoset(self, player: int, actions: int | Sequence[str], name: str = "") -> int:
        """Create an information set with no members yet.

        It stays until it gets members or :meth:`delete_empty_infosets` runs.
        """
        pl = self.player(player)
        infoset = self._create_infoset(pl, self._build_actions(pl, actions), name)
        self._commit()
        return infoset.id

    def set_infoset_player(self, infoset: int, player: int) -> None:
        """Hand an information set over to another personal player."""
        iset = self.infoset(infoset)
        pl = self.player(player)
        if pl.is_chance or iset.player == CHANCE:
            raise GameStructureError("Information sets cannot move to or from the chance player")
        if iset.player == pl.id:
            return
        self._players[iset.player].infosets.remove(iset.id)
        pl.infosets.append(iset.id)
        iset.player = pl.id
        self._commit()

    def merge_infoset(self, to: int, from_: int) -> None:
        """Move every member of ``from_`` into ``to`` and destroy ``from_``.

        Raises:
            GameStructureError: If the sets are the same, differ in action
                count, or only one of them belongs to chance.
        """
        target = self.infoset(to)
        source = self.infoset(from_)
        if target is source:
            raise GameStructureError("Cannot merge an information set with itself")
        if target.num_actions != source.num_actions:
            msg = (
                f"Cannot merge information sets with {target.num_actions} "
                f"and {source.num_actions} actions"
            )
            raise GameStructureError(msg)
        if (target.player == CHANCE) != (source.player == CHANCE):
            raise GameStructureError("Cannot merge chance and personal information sets")
        for member in source.members:
            self._nodes[member].infoset = target.id
            target.members.append(member)
        source.members = []
        self._remove_infoset(source)
        self._commit()

    def split_infoset(self, node: int) -> int:
        """Move ``node`` into a fresh singleton information set and return it.

        A node that is already alone in its set keeps that set.
        """
        n = self._decision_node(node)
        current = self._infosets[n.infoset]
        if len(current.members) == 1:
            return current.id
        actions = [Action(label=a.label, probability=a.probability) for a in current.actions]
        fresh = self._create_infoset(self._players[current.player], actions)
        current.members.remove(n.id)
        self._join(n, fresh)
        self._commit()
        return fresh.id

    def join_infoset(self, node: int, infoset: int) -> None:
        """Move decision node ``node`` into ``infoset``."""
        n = self._decision_node(node)
        target = self.infoset(infoset)
        if n.infoset == target.id:
            return
        current = self._infosets[n.infoset]
        if current.num_actions != target.num_actions:
            raise GameStructureError(
                f"Node {node} has {current.num_actions} actions, "
                f"information set {infoset} has {target.num_actions}"
            )
        if (current.player == CHANCE) != (target.player == CHANCE):
            raise GameStructureError("Cannot move a node between chance and personal information sets")
        self._leave_infoset(n)
        self._join(n, target)
        self._commit()

    def delete_empty_infosets(self) -> int:
        """Remove every information set without members; return how many went."""
        empty = [iset for iset in self._infosets.values() if not iset.members]
        for iset in empty:
            self._remove_infoset(iset)
        self._commit()
        return len(empty)

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def add_move(
        self,
        node: int,
        infoset: int | None = None,
        *,
        player: int | None = None,
        actions: int | Sequence[str] = TreeConfig.DEFAULT_NUM_ACTIONS,
    ) -> int:
        """Turn terminal ``node`` into a decision with one terminal child per action.

        Args:
            node: A terminal node.
            infoset: Information set to join. When omitted a new one is
                created for ``player`` with ``actions`` (a count or labels).

        Returns:
            The handle of the node's information set.
        """
        n = self.node(node)
        if not n.is_terminal:
            raise GameStructureError(f"Node {node} already has a move")
        iset, pl, new_actions = self._resolve_infoset(infoset, player, actions)
        if iset is None:
            iset = self._create_infoset(pl, new_actions)
        self._join(n, iset)
        n.children = [self._new_node(n.id).id for _ in iset.actions]
        self._commit()
        return iset.id

    def insert_move(
        self,
        node: int,
        infoset: int | None = None,
        *,
        player: int | None = None,
        actions: int | Sequence[str] = TreeConfig.DEFAULT_NUM_ACTIONS,
    ) -> int:
        """Splice a new decision between ``node`` and its parent.

        ``node`` (with its subtree) becomes the first child of the new
        decision; the other children are fresh terminal nodes.

        Returns:
            The handle of the inserted node.
        """
        n = self.node(node)
        iset, pl, new_actions = self._resolve_infoset(infoset, player, actions)
        if iset is None:
            iset = self._create_infoset(pl, new_actions)
        inserted = self._new_node(n.parent)
        self._replace_in_parent(n, inserted)
        n.parent = inserted.id
        self._join(inserted, iset)
        inserted.children = [n.id] + [self._new_node(inserted.id).id for _ in iset.actions[1:]]
        self._commit()
        return inserted.id

    def delete_move(self, node: int, keep: int) -> int:
        """Remove the decision at ``node``, keeping only the subtree of child ``keep``.

        Returns:
            The handle of the kept child, which now sits where ``node`` was.
        """
        n = self._decision_node(node)
        if not 0 <= keep < len(n.children):
            raise GameStructureError(f"Node {node} has no action {keep}")
        kept = self._nodes[n.children[keep]]
        for i, c in enumerate(n.children):
            if i != keep:
                self._destroy(c)
        self._replace_in_parent(n, kept)
        self._leave_infoset(n)
        del self._nodes[n.id]
        self._commit()
        return kept.id

    def delete_tree(self, node: int) -> None:
        """Make ``node`` terminal, destroying everything below it."""
        self._clear_below(self.node(node))
        self._commit()

    # ------------------------------------------------------------------
    # Subtree copy and move
    # ------------------------------------------------------------------

    def _snapshot(self, node: int) -> _CopiedNode:
        n = self._nodes[node]
        return _CopiedNode(
            name=n.name,
            infoset=n.infoset,
            outcome=n.outcome,
            children=tuple(self._snapshot(c) for c in n.children),
        )

    def _graft(self, target: Node, copy: _CopiedNode) -> None:
        target.name = copy.name
        target.outcome = copy.outcome
        if copy.infoset is not None:
            self._join(target, self._infosets[copy.infoset])
        for sub in copy.children:
            child = self._new_node(target.id)
            target.children.append(child.id)
            self._graft(child, sub)

    def copy_tree(self, src: int, dest: int) -> None:
        """Replace the subtree at ``dest`` by a copy of the subtree at ``src``.

        Copied nodes join the same information sets and share the same
        outcomes as their originals.
        """
        source = self.node(src)
        target = self.node(dest)
        if self.is_predecessor(dest, src):
            raise GameStructureError("Cannot copy a subtree onto itself or one of its ancestors")
        if target.children and self.is_predecessor(src, dest):
            raise GameStructureError("A copy destination inside the source subtree must be terminal")
        copy = self._snapshot(source.id)
        self._clear_below(target)
        self._graft(target, copy)
        self._commit()

    def move_tree(self, src: int, dest: int) -> None:
        """Move the subtree at ``src`` to ``dest``.

        Whatever was below ``dest`` is destroyed, and the place ``src`` left
        is filled by the ``dest`` node, now a bare terminal with no outcome
        and no name.
        """
        source = self.node(src)
        target = self.node(dest)
        if self.is_predecessor(dest, src):
            raise GameStructureError("Cannot move a subtree onto itself or one of its ancestors")
        if self.is_predecessor(src, dest):
            raise GameStructureError("Cannot move a subtree into itself")
        self._clear_below(target)
        source_siblings = self._nodes[source.parent].children
        target_siblings = self._nodes[target.parent].children
        i = source_siblings.index(source.id)
        j = target_siblings.index(target.id)
        source_siblings[i] = target.id
        target_siblings[j] = source.id
        source.parent, target.parent = target.parent, source.parent
        target.outcome = None
        target.name = ""
        self._commit()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def insert_action(self, infoset: int, position: int | None = None, label: str = "") -> None:
        """Add an action at ``position`` (default: last) to ``infoset``.

        Every member gets a new terminal child at that position. A new
        chance action starts with probability zero.
        """
        iset = self.infoset(infoset)
        if position is None:
            position = iset.num_actions
        if not 0 <= position <= iset.num_actions:
            raise GameStructureError(f"Invalid action position {position}")
        prob = zero(self._number_type) if iset.player == CHANCE else None
        iset.actions.insert(position, Action(label=label, probability=prob))
        for member in iset.members:
            self._nodes[member].children.insert(position, self._new_node(member).id)
        self._commit()

    def delete_action(self, infoset: int, action: int) -> None:
        """Remove ``action`` from ``infoset`` and the matching subtree of each member.

        Remaining chance probabilities are rescaled to sum to one.

        Raises:
            GameStructureError: If the action does not exist or is the only one.
        """
        iset = self.infoset(infoset)
        if not 0 <= action < iset.num_actions:
            raise GameStructureError(f"Information set {infoset} has no action {action}")
        if iset.num_actions == 1:
            raise GameStructureError("Cannot delete the only action of an information set")
        for member in list(iset.members):
            # an earlier member's removed subtree may have contained this one
            if member in self._nodes:
                self._destroy(self._nodes[member].children.pop(action))
        iset.actions.pop(action)
        if iset.player == CHANCE:
            self._normalize_chance(iset)
        self._commit()

    def _normalize_chance(self, iset: Infoset) -> None:
        total = sum((a.probability for a in iset.actions), zero(self._number_type))
        for a in iset.actions:
            if total > 0:
                a.probability = a.probability / total
            else:
                a.probability = self._number_type(1) / iset.num_actions

    def reorder_actions(self, infoset: int, order: Sequence[int]) -> None:
        """Permute the actions of ``infoset``; ``order[k]`` is the old index of new action k."""
        iset = self.infoset(infoset)
        if sorted(order) != list(range(iset.num_actions)):
            raise GameStructureError(f"Not a permutation of {iset.num_actions} actions: {list(order)}")
        iset.actions = [iset.actions[i] for i in order]
        for member in iset.members:
            n = self._nodes[member]
            n.children = [n.children[i] for i in order]
        self._commit()

    def set_chance_probs(self, infoset: int, probs: Sequence[object]) -> None:
        iset = self.infoset(infoset)
        if iset.player != CHANCE:
            raise GameStructureError(f"Information set {infoset} does not belong to chance")
        if len(probs) != iset.num_actions:
            raise GameStructureError(f"Expected {iset.num_actions} probabilities, got {len(probs)}")
        values = [self.coerce(p) for p in probs]
        if any(v < 0 for v in values):
            raise GameStructureError("Chance probabilities must be non-negative")
        if not sums_to_one(values, self._number_type):
            raise GameStructureError("Chance probabilities must sum to one")
        for a, v in zip(iset.actions, values, strict=True):
            a.probability = v
        self._commit()

    # ------------------------------------------------------------------
    # Subgames
    # ------------------------------------------------------------------

    def is_legal_subgame(self, node: int) -> bool:
        """True if no information set touched below ``node`` has members elsewhere."""
        subtree = set(self.nodes(node))
        touched = {self._nodes[n].infoset for n in subtree} - {None}
        return all(
            member in subtree for iset in touched for member in self._infosets[iset].members
        )

    def legal_subgame_roots(self, start: int | None = None) -> list[int]:
        return [n for n in self.nodes(start) if self.is_legal_subgame(n)]

    def subgame_root(self, node: int) -> int:
        """The nearest marked subgame root at or above ``node``."""
        current = self.node(node)
        while not current.subgame_root:
            current = self._nodes[current.parent]
        return current.id

    def mark_subgame(self, node: int) -> None:
        """Mark ``node`` as a subgame root.

        Raises:
            GameStructureError: If ``node`` is not a legal subgame root. The
                game is left unchanged.
        """
        n = self.node(node)
        if not self.is_legal_subgame(node):
            raise GameStructureError(f"Node {node} is not the root of a legal subgame")
        n.subgame_root = True
        self._commit()

    def unmark_subgame(self, node: int) -> None:
        n = self.node(node)
        if node == self._root:
            raise GameStructureError("The root is always a subgame root")
        n.subgame_root = False
        self._commit()

    def mark_subgames(self, roots: Iterable[int]) -> None:
        """Mark every node in ``roots``; all must be legal or none is marked."""
        targets = [self.node(r) for r in roots]
        illegal = [n.id for n in targets if not self.is_legal_subgame(n.id)]
        if illegal:
            raise GameStructureError(f"Not roots of legal subgames: {illegal}")
        for n in targets:
            n.subgame_root = True
        self._commit()

    def unmark_subgames(self, start: int | None = None) -> None:
        """Clear every subgame mark in the subtree at ``start`` except the game root's."""
        for n in list(self.nodes(start)):
            if n != self._root:
                self._nodes[n].subgame_root = False
        self._commit()

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------

    def new_outcome(
        self, payoffs: Mapping[int, object] | Sequence[object] = (), label: str = ""
    ) -> int:
        """Register an outcome.

        Args:
            payoffs: Either a mapping from player id to payoff or a sequence
                in player order (player 1 first). Missing players get zero.
        """
        if isinstance(payoffs, Mapping):
            given = dict(payoffs)
        else:
            if len(payoffs) > self.num_players:
                raise GameStructureError(f"Got {len(payoffs)} payoffs for {self.num_players} players")
            given = {pl: value for pl, value in enumerate(payoffs, start=1)}
        values: dict[int, Number] = {}
        for pl in self.personal_players():
            values[pl.id] = self.coerce(given.pop(pl.id, 0))
        for pl in given:
            self._personal_player(pl)
        outcome = Outcome(id=next(self._handles), label=label, payoffs=values)
        self._outcomes[outcome.id] = outcome
        self._commit()
        return outcome.id

    def set_payoff(self, outcome: int, player: int, value: object) -> None:
        o = self.outcome(outcome)
        self._personal_player(player)
        o.payoffs[player] = self.coerce(value)
        self._commit()

    def set_outcome(self, node: int, outcome: int | None) -> None:
        n = self.node(node)
        if outcome is not None:
            self.outcome(outcome)
        n.outcome = outcome
        self._commit()

    def delete_outcome(self, outcome: int) -> None:
        """Unregister ``outcome`` and detach it from every node that uses it."""
        self.outcome(outcome)
        for n in self.nodes():
            if self._nodes[n].outcome == outcome:
                self._nodes[n].outcome = None
        del self._outcomes[outcome]
        self._commit()

    # ------------------------------------------------------------------
    # Labels (not structural; the revision is left alone)
    # ------------------------------------------------------------------

    def set_node_name(self, node: int, name: str) -> None:
        self.node(node).name = name

    def set_infoset_name(self, infoset: int, name: str) -> None:
        self.infoset(infoset).name = name

    def set_action_label(self, infoset: int, action: int, label: str) -> None:
        iset = self.infoset(infoset)
        if not 0 <= action < iset.num_actions:
            raise GameStructureError(f"Information set {infoset} has no action {action}")
        iset.actions[action].label = label

    def set_player_name(self, player: int, name: str) -> None:
        self.player(player).name = name

    def set_outcome_label(self, outcome: int, label: str) -> None:
        self.outcome(outcome).label = label

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Check every structural invariant.

        Raises:
            GameStructureError: Describing the first violation found.
        """
        seen: set[int] = set()
        for n in self.nodes():
            if n in seen:
                raise GameStructureError(f"Node {n} is reachable twice")
            seen.add(n)
            node = self._nodes[n]
            for c in node.children:
                if self._nodes[c].parent != n:
                    raise GameStructureError(f"Node {c} does not point back to parent {n}")
            if node.infoset is None:
                if node.children:
                    raise GameStructureError(f"Node {n} has children but no information set")
                continue
            iset = self._infosets.get(node.infoset)
            if iset is None or n not in iset.members:
                raise GameStructureError(f"Node {n} is not a member of its information set")
            if len(node.children) != iset.num_actions:
                raise GameStructureError(
                    f"Node {n} has {len(node.children)} children, "
                    f"its information set has {iset.num_actions} actions"
                )
            if node.outcome is not None and node.outcome not in self._outcomes:
                raise GameStructureError(f"Node {n} refers to a deleted outcome")
        if seen != set(self._nodes):
            raise GameStructureError("The arena holds nodes unreachable from the root")
        if self._nodes[self._root].parent is not None:
            raise GameStructureError("The root has a parent")
        for iset in self._infosets.values():
            if iset.id not in self._players[iset.player].infosets:
                raise GameStructureError(f"Information set {iset.id} is not listed by its player")
            for member in iset.members:
                if self._nodes[member].infoset != iset.id:
                    raise GameStructureError(f"Information set {iset.id} lists foreign node {member}")
        for n in seen:
            if self._nodes[n].subgame_root and not self.is_legal_subgame(n):
                raise GameStructureError(f"Node {n} is marked as an illegal subgame root")


def payoff_vector(game: ExtensiveFormGame, outcome: int | None) -> dict[int, AnyNumber]:
    """Payoffs of ``outcome`` for every personal player (zeros for None)."""
    if outcome is None:
        return {pl.id: zero(game.number_type) for pl in game.personal_players()}
    return game.payoff(outcome)
