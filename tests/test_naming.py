from datetime import datetime

import pytest

from quickpackage.config import QuickPackageConfig
from quickpackage.errors import InvalidPackageName
from quickpackage.naming import default_package_name, validate_package_name


def test_default_name_embeds_timestamp():
    now = datetime(2024, 5, 1, 14, 3, 27)
    assert default_package_name("Home", now=now) == "Home-2024-05-01--14-03-27.zip"


def test_default_name_follows_config():
    cfg = QuickPackageConfig(package_name_format="pkg_{name}_{timestamp}.zip", timestamp_format="%Y%m%d")
    now = datetime(2024, 5, 1)
    assert default_package_name("Home", cfg, now) == "pkg_Home_20240501.zip"


def test_validate_strips_whitespace():
    assert validate_package_name("  Home.zip ") == "Home.zip"


@pytest.mark.parametrize("name", [None, "", "a/b", "a\\b", "a:b", ".", ".."])
def test_validate_rejects(name):
    with pytest.raises(InvalidPackageName):
        validate_package_name(name)
