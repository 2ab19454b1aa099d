"""Recipient hierarchy traversal.

Walks the parent-reference graph through keyed, tenant-scoped
lookups. Both directions are bounded so that corrupt (cyclic)
data can never make a walk run forever.
"""

from collections import deque
from dataclasses import dataclass

from sqlalchemy.orm import Session

from src.database.models import Recipient
from src.database.repositories import RecipientRepository
from src.settings import settings
from src.utils.logger import setup_logger

logger = setup_logger("services.hierarchy.traversal")


@dataclass(frozen=True)
class HierarchyNode:
    """Recipient tagged with its distance from the traversal root.

    Attributes:
        recipient: Descendant recipient.
        depth: 1 for direct children, 2 for grandchildren, ...
    """

    recipient: Recipient
    depth: int


class HierarchyTraversal:
    """Ancestor and descendant walks over the recipient hierarchy.

    Attributes:
        _repository: Recipient data access.
        _max_iterations: Cap on upward hops.
    """

    def __init__(self, session: Session, max_iterations: int | None = None) -> None:
        """Initialize traversal engine.

        Args:
            session: SQLAlchemy session instance.
            max_iterations: Upward hop cap; defaults to settings.
        """
        self._repository = RecipientRepository(session)
        self._max_iterations = max_iterations or settings.transfers.max_ancestor_iterations

    def ancestor_chain(self, recipient_id: int, organization_id: int) -> list[Recipient]:
        """Get parents from nearest to root.

        A parent that is missing or owned by another organization ends
        the chain silently. The walk also stops after the iteration cap.

        Args:
            recipient_id: Starting recipient.
            organization_id: Owning tenant.

        Returns:
            Ancestors, nearest parent first. Empty for roots or unknown ids.
        """
        ancestors: list[Recipient] = []
        current = self._repository.get_for_organization(recipient_id, organization_id)
        iterations = 0

        while current is not None and current.parent_recipient_id is not None:
            if iterations >= self._max_iterations:
                logger.warning(
                    f"Ancestor walk from recipient {recipient_id} hit the "
                    f"{self._max_iterations}-hop cap; chain truncated"
                )
                break

            parent = self._repository.get_for_organization(
                current.parent_recipient_id,
                organization_id,
            )
            if parent is None:
                break

            ancestors.append(parent)
            current = parent
            iterations += 1

        return ancestors

    def direct_children(self, recipient_id: int, organization_id: int) -> list[Recipient]:
        """Get immediate children, oldest first."""
        return self._repository.get_direct_children(recipient_id, organization_id)

    def descendant_tree(
        self,
        recipient_id: int,
        organization_id: int,
        max_depth: int | None = None,
    ) -> list[HierarchyNode]:
        """Breadth-first expansion below a recipient.

        Args:
            recipient_id: Root of the walk (not included in the result).
            organization_id: Owning tenant.
            max_depth: Deepest level to return; defaults to settings.

        Returns:
            Nodes ordered by depth, then creation time.
        """
        if max_depth is None:
            max_depth = settings.transfers.default_descendant_depth

        nodes: list[HierarchyNode] = []
        visited = {recipient_id}
        frontier: deque[tuple[list[int], int]] = deque([([recipient_id], 1)])

        while frontier:
            parent_ids, depth = frontier.popleft()
            if depth > max_depth:
                break

            children = [
                child
                for child in self._repository.get_children_of(parent_ids, organization_id)
                if child.id not in visited
            ]
            if not children:
                continue

            for child in children:
                visited.add(child.id)
                nodes.append(HierarchyNode(recipient=child, depth=depth))

            frontier.append(([child.id for child in children], depth + 1))

        return nodes

    def would_create_cycle(
        self,
        recipient_id: int,
        proposed_parent_id: int,
        organization_id: int,
    ) -> bool:
        """Check if making proposed_parent_id the parent closes a loop.

        Args:
            recipient_id: Recipient receiving the new parent.
            proposed_parent_id: Candidate parent.
            organization_id: Owning tenant.

        Returns:
            True for self-parenting or when the recipient is already an
            ancestor of the candidate parent.
        """
        if recipient_id == proposed_parent_id:
            return True

        ancestors = self.ancestor_chain(proposed_parent_id, organization_id)
        return any(ancestor.id == recipient_id for ancestor in ancestors)

    def hierarchy_depth(self, recipient_id: int, organization_id: int) -> int:
        """Number of ancestors above a recipient (0 for roots)."""
        return len(self.ancestor_chain(recipient_id, organization_id))
