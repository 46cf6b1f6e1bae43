"""
Editor settings - thin wrapper around QSettings with grouped keys
"""
from PyQt6 import QtCore


# Define which group each setting belongs to
# Note: Using 'Main' instead of 'General' to avoid QSettings URL encoding to %General
SETTING_GROUPS = {
    'Editor': ['PlaceOnPathOnly', 'ShowGrid', 'MapDirectory'],
    'Comments': ['ArrowColor', 'ArrowThickness'],
    'AutoSave': ['AutoSaveInterval', 'AutoSaveMaxAge'],
}

DEFAULTS = {
    'PlaceOnPathOnly': True,
    'ShowGrid': True,
    'MapDirectory': 'maps',
    'ArrowColor': '#ff0000',
    'ArrowThickness': 10,
    'AutoSaveInterval': 30,
    'AutoSaveMaxAge': 3600,
}


def _get_group_for_setting(name):
    """Determine which group a setting belongs to"""
    for group, settings in SETTING_GROUPS.items():
        if name in settings:
            return group

    # Default to Main (not General to avoid %General encoding)
    return 'Main'


def _convert(value, default):
    """Convert a raw QSettings value to the type of `default`"""
    # Handle None/null values
    if value is None or value == 'None' or value == '@Invalid()':
        return None

    if default is not None:
        target_type = type(default)

        # Handle bool specially (QSettings returns strings 'true'/'false')
        if target_type is bool:
            if isinstance(value, bool):
                return value
            return value in ('true', 'True', '1', 1, True)

        try:
            if target_type in (int, float, str):
                return target_type(value)
        except (ValueError, TypeError):
            return default

    # No default provided - try to intelligently convert the value
    if isinstance(value, str):
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        try:
            if '.' not in value:
                return int(value)
            return float(value)
        except ValueError:
            return value

    return value


class EditorSettings:
    """
    Grouped access to a QSettings store.

    The QSettings object is passed in so tests and tools can point it at
    any INI file.
    """

    def __init__(self, qsettings: QtCore.QSettings):
        self.qsettings = qsettings

    @classmethod
    def from_ini(cls, path: str) -> 'EditorSettings':
        return cls(QtCore.QSettings(str(path), QtCore.QSettings.Format.IniFormat))

    def setting(self, name, default=None):
        """
        Read a setting, converted to the type of its default.
        """
        if default is None:
            default = DEFAULTS.get(name)

        full_key = f"{_get_group_for_setting(name)}/{name}"

        if self.qsettings.contains(full_key):
            value = self.qsettings.value(full_key)
        elif self.qsettings.contains(name):
            # Fallback to old location (no group)
            value = self.qsettings.value(name)
        else:
            return default

        return _convert(value, default)

    def set_setting(self, name, value):
        """Store a setting under its group"""
        assert isinstance(name, str)
        self.qsettings.setValue(f"{_get_group_for_setting(name)}/{name}", value)

    def ensure_settings_visible(self):
        """
        Write every known setting that is missing, so the settings file
        lists all of them with their defaults.
        """
        for name, default in DEFAULTS.items():
            if not self.qsettings.contains(f"{_get_group_for_setting(name)}/{name}"):
                self.set_setting(name, default)
        self.qsettings.sync()

    # Convenience accessors

    @property
    def place_on_path_only(self) -> bool:
        return self.setting('PlaceOnPathOnly')

    @property
    def show_grid(self) -> bool:
        return self.setting('ShowGrid')

    @property
    def arrow_color(self) -> str:
        return self.setting('ArrowColor')

    @property
    def arrow_thickness(self) -> int:
        return self.setting('ArrowThickness')

    @property
    def autosave_interval(self) -> int:
        return self.setting('AutoSaveInterval')

    @property
    def autosave_max_age(self) -> int:
        return self.setting('AutoSaveMaxAge')

    @property
    def map_directory(self) -> str:
        return self.setting('MapDirectory')
