"""Integration tests for parent assignment validation."""

from collections.abc import Callable

import pytest
from sqlalchemy.orm import Session

from src.database.models import Organization, Recipient, RecipientType
from src.services.errors import (
    CycleDetectedError,
    DepthExceededError,
    HierarchyRuleError,
    RecipientNotFoundError,
)
from src.services.hierarchy import HierarchyTraversal, HierarchyValidator

PROCESSOR = RecipientType.PROCESSOR
SUB = RecipientType.SUB_PROCESSOR
DEPT = RecipientType.INTERNAL_DEPARTMENT


class TestValidateParentAssignment:
    @staticmethod
    def test_sub_processor_under_processor(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        parent = make_recipient("Cloud Co", PROCESSOR)
        child = make_recipient("Mail Co", SUB)

        HierarchyValidator(session).validate_parent_assignment(child.id, parent.id, organization.id)

    @staticmethod
    def test_processor_cannot_have_parent(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        parent = make_recipient("Cloud Co", PROCESSOR)
        child = make_recipient("Other Co", PROCESSOR)

        with pytest.raises(HierarchyRuleError, match="cannot have a parent"):
            HierarchyValidator(session).validate_parent_assignment(
                child.id,
                parent.id,
                organization.id,
            )

    @staticmethod
    def test_parent_type_not_allowed(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        parent = make_recipient("Finance", DEPT)
        child = make_recipient("Mail Co", SUB)

        with pytest.raises(HierarchyRuleError, match="not an allowed parent type"):
            HierarchyValidator(session).validate_parent_assignment(
                child.id,
                parent.id,
                organization.id,
            )

    @staticmethod
    def test_cross_tenant_parent_not_found(
        session: Session,
        organization: Organization,
        other_organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        parent = make_recipient("Foreign Co", PROCESSOR, org=other_organization)
        child = make_recipient("Mail Co", SUB)

        with pytest.raises(RecipientNotFoundError):
            HierarchyValidator(session).validate_parent_assignment(
                child.id,
                parent.id,
                organization.id,
            )

    @staticmethod
    def test_unknown_recipient(session: Session, organization: Organization) -> None:
        with pytest.raises(RecipientNotFoundError):
            HierarchyValidator(session).validate_parent_assignment(1, 2, organization.id)

    @staticmethod
    def test_reverse_edge_rejected_as_cycle(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        first = make_recipient("B", SUB)
        second = make_recipient("A", SUB, parent=first)

        with pytest.raises(CycleDetectedError):
            HierarchyValidator(session).validate_parent_assignment(
                first.id,
                second.id,
                organization.id,
            )

    @staticmethod
    def test_self_parent_rejected(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        node = make_recipient("A", SUB)

        with pytest.raises(CycleDetectedError):
            HierarchyValidator(session).validate_parent_assignment(
                node.id,
                node.id,
                organization.id,
            )

    @staticmethod
    def test_sixth_sub_processor_level_rejected(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        validator = HierarchyValidator(session)
        parent = make_recipient("Cloud Co", PROCESSOR)

        for level in range(1, 6):
            child = make_recipient(f"Level {level}", SUB)
            validator.assign_parent(child.id, parent.id, organization.id)
            parent = child

        sixth = make_recipient("Level 6", SUB)
        with pytest.raises(DepthExceededError) as exc_info:
            validator.assign_parent(sixth.id, parent.id, organization.id)

        assert exc_info.value.depth == 6
        assert exc_info.value.max_depth == 5
        assert sixth.parent_recipient_id is None

    @staticmethod
    def test_moved_subtree_checked_against_ceiling(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        target = make_recipient("Cloud Co", PROCESSOR)
        for level in range(1, 4):
            target = make_recipient(f"Level {level}", SUB, parent=target)

        branch = make_recipient("Branch", SUB, parent=make_recipient("Other Co", PROCESSOR))
        leaf = branch
        for level in range(1, 4):
            leaf = make_recipient(f"Branch {level}", SUB, parent=leaf)

        validator = HierarchyValidator(session)
        with pytest.raises(DepthExceededError) as exc_info:
            validator.assign_parent(branch.id, target.id, organization.id)

        assert exc_info.value.depth == 6
        assert exc_info.value.max_depth == 5
        assert HierarchyTraversal(session).hierarchy_depth(leaf.id, organization.id) == 4

    @staticmethod
    def test_shallow_subtree_fits(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        target = make_recipient("Cloud Co", PROCESSOR)
        for level in range(1, 4):
            target = make_recipient(f"Level {level}", SUB, parent=target)
        branch = make_recipient("Branch", SUB)
        leaf = make_recipient("Branch leaf", SUB, parent=branch)

        HierarchyValidator(session).assign_parent(branch.id, target.id, organization.id)

        assert HierarchyTraversal(session).hierarchy_depth(leaf.id, organization.id) == 5


class TestAssignParent:
    @staticmethod
    def test_writes_parent(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        parent = make_recipient("Cloud Co", PROCESSOR)
        child = make_recipient("Mail Co", SUB)

        updated = HierarchyValidator(session).assign_parent(child.id, parent.id, organization.id)

        assert updated.parent_recipient_id == parent.id
        assert HierarchyTraversal(session).hierarchy_depth(child.id, organization.id) == 1

    @staticmethod
    def test_detach_always_allowed(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        parent = make_recipient("Cloud Co", PROCESSOR)
        child = make_recipient("Mail Co", SUB, parent=parent)

        updated = HierarchyValidator(session).assign_parent(child.id, None, organization.id)

        assert updated.parent_recipient_id is None

    @staticmethod
    def test_detach_unknown_recipient(session: Session, organization: Organization) -> None:
        with pytest.raises(RecipientNotFoundError):
            HierarchyValidator(session).assign_parent(404, None, organization.id)

    @staticmethod
    def test_rejected_cycle_leaves_parent_unchanged(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        first = make_recipient("B", SUB)
        second = make_recipient("A", SUB, parent=first)

        with pytest.raises(CycleDetectedError):
            HierarchyValidator(session).assign_parent(first.id, second.id, organization.id)

        assert first.parent_recipient_id is None
        assert second not in HierarchyTraversal(session).ancestor_chain(first.id, organization.id)


class TestCheckHealth:
    @staticmethod
    def test_reports_orphans_and_depth_violations(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        orphan = make_recipient("Orphan Co", SUB)
        node = make_recipient("Cloud Co", PROCESSOR)
        for level in range(1, 7):
            node = make_recipient(f"Level {level}", SUB, parent=node)

        report = HierarchyValidator(session).check_health(organization.id)

        assert [r.id for r in report.orphaned_sub_processors] == [orphan.id]
        assert [v.recipient.id for v in report.depth_violations] == [node.id]
        assert report.depth_violations[0].current_depth == 6
        assert report.depth_violations[0].max_allowed == 5
        assert report.total_issues == 2

    @staticmethod
    def test_healthy_hierarchy(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        parent = make_recipient("Cloud Co", PROCESSOR)
        make_recipient("Mail Co", SUB, parent=parent)

        assert HierarchyValidator(session).check_health(organization.id).total_issues == 0
