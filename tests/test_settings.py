import pytest

from wizmap.settings import EditorSettings, DEFAULTS, _get_group_for_setting


@pytest.fixture
def ini_path(tmp_path):
    return str(tmp_path / 'wizmap.ini')


def test_defaults_when_file_is_empty(ini_path):
    settings = EditorSettings.from_ini(ini_path)
    assert settings.place_on_path_only is True
    assert settings.show_grid is True
    assert settings.arrow_color == '#ff0000'
    assert settings.arrow_thickness == 10
    assert settings.autosave_interval == 30
    assert settings.autosave_max_age == 3600
    assert settings.map_directory == 'maps'


def test_groups():
    assert _get_group_for_setting('PlaceOnPathOnly') == 'Editor'
    assert _get_group_for_setting('ArrowColor') == 'Comments'
    assert _get_group_for_setting('AutoSaveInterval') == 'AutoSave'
    assert _get_group_for_setting('LastOpenedMap') == 'Main'


def test_values_survive_reopening(ini_path):
    settings = EditorSettings.from_ini(ini_path)
    settings.set_setting('ArrowThickness', 14)
    settings.set_setting('PlaceOnPathOnly', False)
    settings.set_setting('ArrowColor', '#00ff00')
    settings.qsettings.sync()

    reopened = EditorSettings.from_ini(ini_path)
    assert reopened.arrow_thickness == 14
    assert reopened.place_on_path_only is False
    assert reopened.arrow_color == '#00ff00'


def test_ungrouped_keys_are_still_read(ini_path):
    settings = EditorSettings.from_ini(ini_path)
    settings.qsettings.setValue('ShowGrid', 'false')
    assert settings.show_grid is False


def test_bad_numbers_fall_back_to_default(ini_path):
    settings = EditorSettings.from_ini(ini_path)
    settings.set_setting('AutoSaveInterval', 'often')
    assert settings.autosave_interval == 30


def test_ensure_settings_visible_writes_every_default(ini_path):
    settings = EditorSettings.from_ini(ini_path)
    settings.ensure_settings_visible()

    reopened = EditorSettings.from_ini(ini_path)
    for name in DEFAULTS:
        assert reopened.qsettings.contains(f"{_get_group_for_setting(name)}/{name}")
