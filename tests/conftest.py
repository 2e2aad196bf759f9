from __future__ import annotations

from dataclasses import dataclass

import pytest

from quickpackage.config import QuickPackageConfig
from quickpackage.core import QuickPackage
from quickpackage.security.context import SecurityContext

ADMIN = "sitecore\\admin"
EDITOR = "sitecore\\editor"
RESTRICTED = "sitecore\\restricted"


@dataclass
class Tree:
    sitecore: str
    content: str
    home: str
    a: str
    b: str
    other: str


@pytest.fixture
def config(tmp_path) -> QuickPackageConfig:
    return QuickPackageConfig(
        db_uri=str(tmp_path / "content.db"),
        data_folder=str(tmp_path / "data"),
        elevated_user=ADMIN,
    )


@pytest.fixture
def qp(config) -> QuickPackage:
    service = QuickPackage.from_config(config)
    service.accounts.register_user(ADMIN, full_name="Administrator", is_admin=True)
    service.accounts.register_user(EDITOR, full_name="Jane Editor")
    service.accounts.register_user(RESTRICTED)
    return service


@pytest.fixture
def tree(qp) -> Tree:
    """
    /sitecore
    /sitecore/content
    /sitecore/content/Home        (en v1, v2)
    /sitecore/content/Home/A      (en v1)
    /sitecore/content/Home/B      (en v1)
    /sitecore/content/Other       (en v1)
    """
    db = qp.database
    sitecore = db.add_item("sitecore", item_id="root-sitecore")
    content = db.add_item("content", parent_id=sitecore, item_id="root-content")
    home = db.add_item("Home", parent_id=content, item_id="home")
    a = db.add_item("A", parent_id=home, item_id="home-a", sort_order=1)
    b = db.add_item("B", parent_id=home, item_id="home-b", sort_order=2)
    other = db.add_item("Other", parent_id=content, item_id="other")

    db.add_version(home, {"title": "Home v1"})
    db.add_version(home, {"title": "Home v2"})
    db.add_version(a, {"title": "A"})
    db.add_version(b, {"title": "B"})
    db.add_version(other, {"title": "Other"})

    return Tree(sitecore=sitecore, content=content, home=home, a=a, b=b, other=other)


@pytest.fixture
def admin_ctx(qp) -> SecurityContext:
    return SecurityContext(qp.accounts.get_user(ADMIN), "shell")


@pytest.fixture
def editor_ctx(qp) -> SecurityContext:
    return SecurityContext(qp.accounts.get_user(EDITOR), "website")
