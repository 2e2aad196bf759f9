import pytest

from quickpackage.content.query import DescendantQuery


def test_sibling_differing_only_in_case_is_rejected(qp, tree):
    with pytest.raises(ValueError):
        qp.database.add_item("home", parent_id=tree.content, item_id="zz-lower")

    with qp.database.pool.connection() as conn:
        row = conn.fetch_one("SELECT COUNT(*) AS n FROM items WHERE item_id = ?", ("zz-lower",))
    assert row["n"] == 0


def test_schema_enforces_case_insensitive_paths(qp, tree):
    with qp.database.pool.connection() as conn:
        with pytest.raises(RuntimeError):
            conn.execute(
                "INSERT INTO items(item_id, parent_id, name, path) VALUES (?, ?, ?, ?)",
                ("zz-lower", tree.content, "home", "/sitecore/content/home"),
            )


def test_lookup_by_path_ignores_case(qp, tree, admin_ctx):
    item = qp.database.get_item_by_path("/SITECORE/content/home", admin_ctx)

    assert item.item_id == tree.home
    assert item.path == "/sitecore/content/Home"


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b"])
def test_invalid_item_names_are_rejected(qp, tree, name):
    with pytest.raises(ValueError):
        qp.database.add_item(name, parent_id=tree.home)


def test_dotted_names_are_ordinary_items(qp, tree, admin_ctx):
    dots = qp.database.add_item("...", parent_id=tree.home, sort_order=3)
    qp.database.add_version(dots)

    items = qp.database.select_items(
        DescendantQuery.from_path("/sitecore/content/Home"), admin_ctx
    )

    assert [i.item_id for i in items] == [tree.a, tree.b, dots]


def test_unknown_parent_is_rejected(qp, tree):
    with pytest.raises(ValueError):
        qp.database.add_item("Orphan", parent_id="missing")
