import pytest

from quickpackage.security.accounts import is_readable
from quickpackage.security.context import User
from quickpackage.security.switcher import UserSwitcher

from .conftest import ADMIN, EDITOR


def test_nearest_rule_wins():
    rules = [("/sitecore/content", False), ("/sitecore/content/Home", True)]

    assert is_readable("/sitecore/content/Home/A", rules)
    assert not is_readable("/sitecore/content/Other", rules)
    assert is_readable("/sitecore/system", rules)


def test_rule_does_not_match_sibling_prefix():
    rules = [("/sitecore/content/Home", False)]

    assert not is_readable("/sitecore/content/Home", rules)
    assert is_readable("/sitecore/content/Home2", rules)


def test_rules_are_case_insensitive():
    assert not is_readable("/Sitecore/Content/home", [("/sitecore/content/Home", False)])


def test_switcher_revokes_on_success_and_failure():
    admin = User("sitecore\\admin", is_admin=True)

    switcher = UserSwitcher(admin, site="shell")
    with switcher as ctx:
        assert switcher.active
        assert ctx.site == "shell"
    assert not ctx.active

    failing = UserSwitcher(admin, site="shell")
    with pytest.raises(KeyError):
        with failing as ctx2:
            raise KeyError("boom")
    assert not ctx2.active
    assert not failing.active


def test_switcher_is_single_use():
    switcher = UserSwitcher(User("u"), site="shell")
    with switcher:
        pass
    with pytest.raises(RuntimeError):
        with switcher:
            pass


def test_registry_round_trip(qp):
    admin = qp.accounts.get_user(ADMIN)
    editor = qp.accounts.get_user(EDITOR)

    assert admin.is_admin
    assert not editor.is_admin
    assert editor.display_name == "Jane Editor"
    assert qp.accounts.find_user("nobody") is None


def test_admin_bypasses_rules(qp, tree, admin_ctx, editor_ctx):
    qp.accounts.set_access(tree.home, ADMIN, False)
    qp.accounts.set_access(tree.home, EDITOR, False)

    assert qp.database.get_item(tree.home, admin_ctx) is not None
    assert qp.database.get_item(tree.home, editor_ctx) is None


def test_access_rule_can_be_changed(qp, tree, editor_ctx):
    qp.accounts.set_access(tree.home, EDITOR, False)
    qp.accounts.set_access(tree.home, EDITOR, True)

    assert qp.database.get_item(tree.home, editor_ctx) is not None
