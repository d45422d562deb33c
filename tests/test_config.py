"""
Tests for the settings file: location override, recent imports, timeout.
"""
import json
import os

import pytest

from constants import DEFAULT_COLLABORATOR_TIMEOUT_S
from main.config_mixin import ConfigMixin
from utils.path_resolver import get_config_dir, get_config_file


class _Host(ConfigMixin):
    """Bare host for the mixin, no window"""

    def __init__(self):
        self.imported = []
        self._init_config()

    def import_batch_file(self, filepath):
        self.imported.append(filepath)


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    path = tmp_path / 'settings'
    monkeypatch.setenv('CALENDAR_EDITOR_CONFIG_DIR', str(path))
    return path


class TestPathResolver:

    def test_env_override(self, config_dir):
        assert get_config_dir() == config_dir
        assert get_config_file() == config_dir / 'config.json'

    def test_default_under_home(self, monkeypatch):
        monkeypatch.delenv('CALENDAR_EDITOR_CONFIG_DIR', raising=False)
        assert get_config_dir().name == '.calendar_editor'


class TestConfigMixin:

    def test_defaults_without_file(self, config_dir):
        host = _Host()
        assert host.recent_files == []
        assert host.collaborator_timeout_s == DEFAULT_COLLABORATOR_TIMEOUT_S
        assert not config_dir.exists()

    def test_recent_files_saved(self, config_dir, tmp_path):
        batch = tmp_path / 'batch.json'
        batch.write_text('[]', encoding='utf-8')
        host = _Host()
        host._add_to_recent_files(str(batch))
        saved = json.loads((config_dir / 'config.json').read_text(encoding='utf-8'))
        assert saved['recent_files'] == [str(batch)]
        assert _Host().recent_files == [str(batch)]

    def test_recent_files_most_recent_first(self, config_dir):
        host = _Host()
        for name in ['a', 'b', 'a']:
            host._add_to_recent_files(name)
        assert host.recent_files == ['a', 'b']

    def test_recent_files_capped(self, config_dir):
        host = _Host()
        for index in range(15):
            host._add_to_recent_files(f'file_{index}')
        assert len(host.recent_files) == host.max_recent_files
        assert host.recent_files[0] == 'file_14'

    def test_missing_recent_files_dropped_on_load(self, config_dir):
        os.makedirs(config_dir)
        (config_dir / 'config.json').write_text(
            json.dumps({'recent_files': ['/nope/batch.json'], 'collaborator_timeout_s': 5}),
            encoding='utf-8',
        )
        host = _Host()
        assert host.recent_files == []
        assert host.collaborator_timeout_s == 5.0

    def test_bad_timeout_ignored(self, config_dir):
        os.makedirs(config_dir)
        (config_dir / 'config.json').write_text(json.dumps({'collaborator_timeout_s': -1}), encoding='utf-8')
        assert _Host().collaborator_timeout_s == DEFAULT_COLLABORATOR_TIMEOUT_S

    def test_corrupt_file_raises_in_debug(self, config_dir):
        os.makedirs(config_dir)
        (config_dir / 'config.json').write_text('{not json', encoding='utf-8')
        with pytest.raises(ValueError):
            _Host()
