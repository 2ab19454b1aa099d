"""Integration tests for recipient hierarchy traversal."""

from collections.abc import Callable

from sqlalchemy.orm import Session

from src.database.models import Organization, Recipient, RecipientType
from src.services.hierarchy import HierarchyTraversal

SUB = RecipientType.SUB_PROCESSOR


class TestAncestorChain:
    @staticmethod
    def test_nearest_parent_first(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        root = make_recipient("Cloud Co")
        middle = make_recipient("Mail Co", SUB, parent=root)
        leaf = make_recipient("Relay Co", SUB, parent=middle)

        chain = HierarchyTraversal(session).ancestor_chain(leaf.id, organization.id)

        assert [r.id for r in chain] == [middle.id, root.id]

    @staticmethod
    def test_root_has_no_ancestors(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        root = make_recipient("Cloud Co")
        assert HierarchyTraversal(session).ancestor_chain(root.id, organization.id) == []

    @staticmethod
    def test_unknown_recipient(session: Session, organization: Organization) -> None:
        assert HierarchyTraversal(session).ancestor_chain(9999, organization.id) == []

    @staticmethod
    def test_cross_tenant_parent_ends_chain(
        session: Session,
        organization: Organization,
        other_organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        foreign = make_recipient("Foreign Co", org=other_organization)
        child = make_recipient("Child Co", SUB, parent=foreign)

        assert HierarchyTraversal(session).ancestor_chain(child.id, organization.id) == []

    @staticmethod
    def test_cycle_is_bounded(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        first = make_recipient("A", SUB)
        second = make_recipient("B", SUB, parent=first)
        first.parent_recipient_id = second.id
        session.flush()

        chain = HierarchyTraversal(session, max_iterations=4).ancestor_chain(
            first.id,
            organization.id,
        )

        assert len(chain) == 4

    @staticmethod
    def test_default_cap_is_fifteen(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        node = make_recipient("Dept 0", RecipientType.INTERNAL_DEPARTMENT)
        for index in range(1, 20):
            node = make_recipient(f"Dept {index}", RecipientType.INTERNAL_DEPARTMENT, parent=node)

        assert len(HierarchyTraversal(session).ancestor_chain(node.id, organization.id)) == 15


class TestDescendantTree:
    @staticmethod
    def test_breadth_first_with_depth(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        root = make_recipient("Cloud Co")
        child_a = make_recipient("A", SUB, parent=root)
        child_b = make_recipient("B", SUB, parent=root)
        grandchild = make_recipient("A1", SUB, parent=child_a)

        nodes = HierarchyTraversal(session).descendant_tree(root.id, organization.id)

        assert [(n.recipient.id, n.depth) for n in nodes] == [
            (child_a.id, 1),
            (child_b.id, 1),
            (grandchild.id, 2),
        ]

    @staticmethod
    def test_max_depth_limits_expansion(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        root = make_recipient("Cloud Co")
        child = make_recipient("A", SUB, parent=root)
        make_recipient("A1", SUB, parent=child)

        nodes = HierarchyTraversal(session).descendant_tree(root.id, organization.id, max_depth=1)

        assert [n.recipient.id for n in nodes] == [child.id]

    @staticmethod
    def test_cycle_terminates(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        first = make_recipient("A", SUB)
        second = make_recipient("B", SUB, parent=first)
        first.parent_recipient_id = second.id
        session.flush()

        nodes = HierarchyTraversal(session).descendant_tree(first.id, organization.id)

        assert [n.recipient.id for n in nodes] == [second.id]

    @staticmethod
    def test_other_tenant_children_hidden(
        session: Session,
        organization: Organization,
        other_organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        root = make_recipient("Cloud Co")
        make_recipient("Foreign", SUB, parent=root, org=other_organization)

        assert HierarchyTraversal(session).descendant_tree(root.id, organization.id) == []


class TestCycleAndDepth:
    @staticmethod
    def test_self_parent_is_cycle(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        node = make_recipient("A", SUB)
        assert HierarchyTraversal(session).would_create_cycle(node.id, node.id, organization.id)

    @staticmethod
    def test_reverse_edge_is_cycle(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        parent = make_recipient("B", SUB)
        child = make_recipient("A", SUB, parent=parent)

        traversal = HierarchyTraversal(session)

        assert traversal.would_create_cycle(parent.id, child.id, organization.id)
        assert not traversal.would_create_cycle(child.id, parent.id, organization.id)

    @staticmethod
    def test_hierarchy_depth(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        root = make_recipient("Root")
        child = make_recipient("Child", SUB, parent=root)
        traversal = HierarchyTraversal(session)

        assert traversal.hierarchy_depth(root.id, organization.id) == 0
        assert traversal.hierarchy_depth(child.id, organization.id) == 1

    @staticmethod
    def test_direct_children(
        session: Session,
        organization: Organization,
        make_recipient: Callable[..., Recipient],
    ) -> None:
        root = make_recipient("Root")
        child = make_recipient("Child", SUB, parent=root)
        make_recipient("Grandchild", SUB, parent=child)

        children = HierarchyTraversal(session).direct_children(root.id, organization.id)

        assert [c.id for c in children] == [child.id]
