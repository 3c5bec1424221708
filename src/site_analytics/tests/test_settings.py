import configparser
from unittest import mock
import pytest
from django.conf import settings
from core import settings as core_settings

def test_no_database_configured():
    "nothing is persisted, reports and the management command run without a database"
    assert not settings.DATABASES

def test_cfg():
    config = configparser.ConfigParser(allow_no_value=True)
    config.read_string("[analytics]\nview-id: 12345\n[general]\ndebug: false\n")
    with mock.patch.object(core_settings, 'DYNCONFIG', config):
        assert '12345' == core_settings.cfg('analytics.view-id')
        assert False is core_settings.cfg('general.debug')
        assert 5 == core_settings.cfg('analytics.query-attempts', 5)
        assert None is core_settings.cfg('database.name', None)
        with pytest.raises(ValueError):
            core_settings.cfg('analytics.missing')
