"""
Unit tests for settings loading and the application context
"""
from unittest.mock import patch

import pytest

from portviewer.config import Settings, load_settings
from portviewer.context import AppContext


class TestLoadSettings:
    """Test environment-driven configuration"""

    def test_defaults(self, monkeypatch):
        for var in ('PORTVIEW_REFRESH_INTERVAL', 'PORTVIEW_AUTO_REFRESH', 'PORTVIEW_BACKEND',
                    'PORTVIEW_LOG_DIR', 'PORTVIEW_LOG_LEVEL', 'PORTVIEW_THEME'):
            monkeypatch.delenv(var, raising=False)

        settings = load_settings(dotenv=False)

        assert settings.refresh_interval == 5
        assert settings.auto_refresh is False
        assert settings.backend == 'psutil'
        assert settings.log_dir == 'app_log'
        assert settings.theme == 'system'

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv('PORTVIEW_REFRESH_INTERVAL', '12')
        monkeypatch.setenv('PORTVIEW_AUTO_REFRESH', 'true')
        monkeypatch.setenv('PORTVIEW_BACKEND', 'lsof')
        monkeypatch.setenv('PORTVIEW_LOG_LEVEL', 'debug')

        settings = load_settings(dotenv=False)

        assert settings.refresh_interval == 12
        assert settings.auto_refresh is True
        assert settings.backend == 'lsof'
        assert settings.log_level == 'DEBUG'

    @pytest.mark.parametrize('var,value', [
        ('PORTVIEW_REFRESH_INTERVAL', '0'),
        ('PORTVIEW_REFRESH_INTERVAL', 'fast'),
        ('PORTVIEW_BACKEND', 'netstat'),
        ('PORTVIEW_THEME', 'solarized'),
        ('PORTVIEW_LOG_LEVEL', 'LOUD'),
    ])
    def test_invalid_values(self, monkeypatch, var, value):
        monkeypatch.setenv(var, value)
        with pytest.raises(ValueError):
            load_settings(dotenv=False)

    @patch('portviewer.config.load_dotenv')
    def test_reads_dotenv(self, mock_load_dotenv):
        load_settings()
        mock_load_dotenv.assert_called_once()


class TestAppContext:
    """Test context lifecycle"""

    def test_init_and_teardown(self, tmp_path):
        context = AppContext(Settings(log_dir=str(tmp_path / "logs")), logger_name='portviewer.test.lifecycle')

        context.init()
        assert context.initialized
        assert context.log_file.parent.exists()
        handler_count = len(context.logger.handlers)

        context.init()
        assert len(context.logger.handlers) == handler_count

        context.teardown()
        assert not context.initialized
        assert context.logger.handlers == []

        context.teardown()

    def test_writes_log_file(self, tmp_path):
        settings = Settings(log_dir=str(tmp_path))
        with AppContext(settings, logger_name='portviewer.test.file') as context:
            context.get_logger('store').info("hello from store")

        content = context.log_file.read_text()
        assert "portviewer.test.file.store - INFO - hello from store" in content

    def test_log_message(self, tmp_path):
        context = AppContext(Settings(log_dir=str(tmp_path)), logger_name='portviewer.test.bridge')
        with patch.object(context, 'logger') as mock_logger:
            context.log_message('error', 'boom', {'code': 1})
            mock_logger.error.assert_called_once_with('boom')
            mock_logger.info.assert_called_once_with('data: {"code": 1}')

            context.log_message('debug', 'trace')
            mock_logger.debug.assert_called_once_with('trace')

    def test_theme_cycle(self):
        context = AppContext(Settings(theme='light'))
        assert context.cycle_theme() == 'dark'
        assert context.cycle_theme() == 'system'
        assert context.cycle_theme() == 'light'

    def test_resolved_theme(self, monkeypatch):
        context = AppContext(Settings(theme='system'))

        monkeypatch.setenv('COLORFGBG', '0;15')
        assert context.resolved_theme == 'light'

        monkeypatch.setenv('COLORFGBG', '15;0')
        assert context.resolved_theme == 'dark'

        monkeypatch.delenv('COLORFGBG')
        assert context.resolved_theme == 'dark'

        context.theme_mode = 'light'
        assert context.resolved_theme == 'light'
