"""Type-based hierarchy rules and the parent-assignment gate.

Rules by recipient type:
    - SUB_PROCESSOR: parent must be a PROCESSOR or SUB_PROCESSOR, depth <= 5
      (GDPR Art. 28(2) processor chains).
    - INTERNAL_DEPARTMENT: parent must be an INTERNAL_DEPARTMENT, depth <= 10.
    - All other types are roots and cannot have a parent.
"""

from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from src.database.models import Recipient, RecipientType
from src.database.repositories import RecipientRepository
from src.services.errors import (
    CycleDetectedError,
    DepthExceededError,
    HierarchyRuleError,
    RecipientNotFoundError,
)
from src.services.hierarchy.traversal import HierarchyTraversal
from src.utils.logger import setup_logger

logger = setup_logger("services.hierarchy.rules")


@dataclass(frozen=True)
class HierarchyRule:
    """Parent constraints for one recipient type.

    Attributes:
        can_have_parent: Whether a parent may be set at all.
        allowed_parent_types: Types accepted as parent.
        max_depth: Deepest allowed position (number of ancestors).
    """

    can_have_parent: bool
    allowed_parent_types: frozenset[RecipientType] = frozenset()
    max_depth: int = 0


_ROOT_ONLY = HierarchyRule(can_have_parent=False)

HIERARCHY_RULES: dict[RecipientType, HierarchyRule] = {
    RecipientType.PROCESSOR: _ROOT_ONLY,
    RecipientType.SUB_PROCESSOR: HierarchyRule(
        can_have_parent=True,
        allowed_parent_types=frozenset({RecipientType.PROCESSOR, RecipientType.SUB_PROCESSOR}),
        max_depth=5,
    ),
    RecipientType.JOINT_CONTROLLER: _ROOT_ONLY,
    RecipientType.SERVICE_PROVIDER: _ROOT_ONLY,
    RecipientType.SEPARATE_CONTROLLER: _ROOT_ONLY,
    RecipientType.PUBLIC_AUTHORITY: _ROOT_ONLY,
    RecipientType.INTERNAL_DEPARTMENT: HierarchyRule(
        can_have_parent=True,
        allowed_parent_types=frozenset({RecipientType.INTERNAL_DEPARTMENT}),
        max_depth=10,
    ),
}

_DEEPEST_CEILING = max(rule.max_depth for rule in HIERARCHY_RULES.values())


def rule_for(recipient_type: str) -> HierarchyRule:
    """Look up the hierarchy rule for a stored type value."""
    return HIERARCHY_RULES[RecipientType(recipient_type)]


@dataclass
class DepthViolation:
    """Recipient deeper than its type allows."""

    recipient: Recipient
    current_depth: int
    max_allowed: int


@dataclass
class HierarchyHealthReport:
    """Data quality findings for one organization's hierarchy.

    Attributes:
        orphaned_sub_processors: Sub-processors without a parent.
        depth_violations: Recipients exceeding their depth ceiling.
    """

    orphaned_sub_processors: list[Recipient] = field(default_factory=list)
    depth_violations: list[DepthViolation] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        """Number of findings across all checks."""
        return len(self.orphaned_sub_processors) + len(self.depth_violations)


class HierarchyValidator:
    """Validates and applies parent assignments."""

    def __init__(self, session: Session, traversal: HierarchyTraversal | None = None) -> None:
        """Initialize validator.

        Args:
            session: SQLAlchemy session instance.
            traversal: Traversal engine; built from the session if omitted.
        """
        self._recipients = RecipientRepository(session)
        self._traversal = traversal or HierarchyTraversal(session)

    def validate_parent_assignment(
        self,
        recipient_id: int,
        parent_recipient_id: int,
        organization_id: int,
    ) -> None:
        """Check that a parent may be assigned, without writing anything.

        Args:
            recipient_id: Recipient receiving the parent.
            parent_recipient_id: Candidate parent.
            organization_id: Owning tenant.

        Raises:
            RecipientNotFoundError: Recipient or parent missing or owned elsewhere.
            HierarchyRuleError: Type cannot have a parent or parent type not allowed.
            CycleDetectedError: Assignment would create a loop.
            DepthExceededError: Assignment would push the recipient or one of its
                descendants past its type ceiling.
        """
        recipient = self._recipients.get_for_organization(recipient_id, organization_id)
        if recipient is None:
            raise RecipientNotFoundError(recipient_id)

        rule = rule_for(recipient.type)
        if not rule.can_have_parent:
            raise HierarchyRuleError(
                f"Recipient type {recipient.type} cannot have a parent according to hierarchy rules"
            )

        parent = self._recipients.get_for_organization(parent_recipient_id, organization_id)
        if parent is None:
            raise RecipientNotFoundError(
                parent_recipient_id,
                message="Parent recipient not found or does not belong to organization",
            )

        if RecipientType(parent.type) not in rule.allowed_parent_types:
            allowed = ", ".join(sorted(rule.allowed_parent_types))
            raise HierarchyRuleError(
                f"Parent recipient type {parent.type} is not an allowed parent type for "
                f"{recipient.type}. Allowed types: {allowed}"
            )

        if self._traversal.would_create_cycle(recipient_id, parent_recipient_id, organization_id):
            raise CycleDetectedError(
                "Setting this parent would create a circular reference in the hierarchy"
            )

        new_depth = self._traversal.hierarchy_depth(parent_recipient_id, organization_id) + 1
        if new_depth > rule.max_depth:
            raise DepthExceededError(new_depth, rule.max_depth, recipient.type)

        self._check_subtree_depth(recipient_id, new_depth, organization_id)

    def _check_subtree_depth(self, recipient_id: int, new_depth: int, organization_id: int) -> None:
        """Reject the move if any descendant would end up past its own ceiling.

        The walk only needs to reach the deepest ceiling: anything below
        it is already out of bounds.
        """
        nodes = self._traversal.descendant_tree(
            recipient_id,
            organization_id,
            max_depth=_DEEPEST_CEILING,
        )
        for node in nodes:
            node_rule = rule_for(node.recipient.type)
            if not node_rule.can_have_parent:
                continue
            depth = new_depth + node.depth
            if depth > node_rule.max_depth:
                raise DepthExceededError(depth, node_rule.max_depth, node.recipient.type)

    def assign_parent(
        self,
        recipient_id: int,
        parent_recipient_id: int | None,
        organization_id: int,
    ) -> Recipient:
        """Validate then write a parent reference.

        Passing None detaches the recipient, which is always allowed.

        Args:
            recipient_id: Recipient receiving the parent.
            parent_recipient_id: New parent, or None.
            organization_id: Owning tenant.

        Returns:
            Updated recipient.

        Raises:
            Same errors as ``validate_parent_assignment``.
        """
        if parent_recipient_id is not None:
            try:
                self.validate_parent_assignment(
                    recipient_id,
                    parent_recipient_id,
                    organization_id,
                )
            except (HierarchyRuleError, CycleDetectedError, DepthExceededError) as e:
                logger.warning(
                    f"Rejected parent {parent_recipient_id} for recipient {recipient_id}: {e}"
                )
                raise

        recipient = self._recipients.get_for_organization(recipient_id, organization_id)
        if recipient is None:
            raise RecipientNotFoundError(recipient_id)

        self._recipients.set_parent(recipient, parent_recipient_id)
        logger.info(f"Recipient {recipient_id} parent set to {parent_recipient_id}")
        return recipient

    def check_health(self, organization_id: int) -> HierarchyHealthReport:
        """Report orphaned sub-processors and depth violations.

        Args:
            organization_id: Owning tenant.

        Returns:
            HierarchyHealthReport.
        """
        report = HierarchyHealthReport(
            orphaned_sub_processors=self._recipients.find_orphaned_sub_processors(
                organization_id
            ),
        )

        for recipient in self._recipients.list_with_parent(organization_id):
            max_allowed = rule_for(recipient.type).max_depth
            depth = self._traversal.hierarchy_depth(recipient.id, organization_id)
            if depth > max_allowed:
                report.depth_violations.append(
                    DepthViolation(
                        recipient=recipient,
                        current_depth=depth,
                        max_allowed=max_allowed,
                    )
                )

        return report
