"""
Map Store - Save, load, import, export and auto-save map documents
"""
import json
import random
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .map_data import MapData, MapFormatError
from .paths import PathGraph
from .constants import AUTOSAVE_MAX_AGE, DEFAULT_MAP_NAME, MAP_FORMAT_VERSION
from .logging import log_store


AUTOSAVE_FILE_NAME = 'autosave.json'

LoadedMap = Tuple[MapData, PathGraph]


def generate_map_id() -> str:
    """Random six digit map id"""
    return str(random.randint(100000, 999999))


def is_valid_map_id(map_id: str) -> bool:
    """User supplied map ids must be integers"""
    return bool(re.fullmatch(r'\d+', map_id.strip()))


def _iso(now: datetime) -> str:
    return now.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def _parse_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    return _as_utc(parsed)


def _as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def build_document(map_data: MapData, paths: PathGraph,
                   now: Optional[datetime] = None, autosave: bool = False) -> Dict:
    """
    Build the JSON document for a map and its paths.

    Args:
        map_data: Map to serialize
        paths: Path cells of the map
        now: Save time (defaults to the current time)
        autosave: Mark the document as an auto-save

    Returns:
        JSON-compatible dictionary
    """
    now = now or datetime.now(timezone.utc)
    document = map_data.to_json()
    document['paths'] = paths.to_json()
    document['metadata'] = {
        'savedAt': _iso(now),
        'version': MAP_FORMAT_VERSION,
    }
    if autosave:
        document['metadata']['autoSave'] = True
    return document


def load_document(document: Dict) -> LoadedMap:
    """
    Split a map document into MapData and PathGraph.

    Raises:
        MapFormatError: if the map or its path list is malformed
    """
    map_data = MapData.from_json(document)
    try:
        paths = PathGraph.from_json(document.get('paths'))
    except (KeyError, TypeError, ValueError) as e:
        raise MapFormatError(f"Invalid path list: {e!r}") from e
    return map_data, paths


def export_filename(map_data: MapData, today: Optional[datetime] = None) -> str:
    """'My Map' -> 'my_map_2024-05-01.json'"""
    today = today or datetime.now(timezone.utc)
    slug = re.sub(r'\s+', '_', map_data.name).lower()
    return f"{slug}_{today.strftime('%Y-%m-%d')}.json"


class MapStore:
    """
    Stores map documents as one JSON file per map id in a directory.
    """

    def __init__(self, map_dir: str):
        """
        Initialize the map store.

        Args:
            map_dir: Directory holding <mapId>.json files
        """
        self.map_dir = Path(map_dir)

        # Create map directory if it doesn't exist
        self.map_dir.mkdir(parents=True, exist_ok=True)

    def _map_path(self, map_id: str) -> Path:
        return self.map_dir / f"{map_id}.json"

    @property
    def autosave_path(self) -> Path:
        return self.map_dir / AUTOSAVE_FILE_NAME

    # =========================================================================
    # SAVE / LOAD
    # =========================================================================

    def save_map(self, map_data: MapData, paths: PathGraph,
                 now: Optional[datetime] = None) -> bool:
        """
        Save a map under its map id, overwriting any existing file.

        Returns:
            True if successful, False otherwise
        """
        map_id = map_data.map_id or map_data.id
        if not is_valid_map_id(map_id):
            log_store(f"Refusing to save map with non-numeric id {map_id!r}")
            return False

        try:
            with open(self._map_path(map_id), 'w', encoding='utf-8') as f:
                json.dump(build_document(map_data, paths, now), f, indent=2)
        except OSError as e:
            log_store(f"Error saving map {map_id}: {e}")
            return False

        log_store(f"Saved map '{map_data.name}' ({map_id})")
        return True

    def load_map(self, map_id: str) -> Optional[LoadedMap]:
        """
        Load a map by id.

        Returns:
            (MapData, PathGraph), or None if missing or unreadable
        """
        file_path = self._map_path(map_id)
        if not file_path.exists():
            return None

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return load_document(json.load(f))
        except (OSError, ValueError) as e:
            log_store(f"Error loading map {map_id}: {e}")
            return None

    def list_maps(self) -> List[Dict]:
        """
        Summaries of every stored map.

        Returns:
            List of {'mapId', 'name', 'savedAt'} dictionaries sorted by map id
        """
        summaries = []

        for json_file in sorted(self.map_dir.glob('*.json')):
            if json_file.name == AUTOSAVE_FILE_NAME:
                continue
            try:
                with open(json_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    log_store(f"Skipping {json_file}: not a map document")
                    continue
                summaries.append({
                    'mapId': str(data.get('mapId') or data.get('id') or json_file.stem),
                    'name': data.get('name', ''),
                    'savedAt': (data.get('metadata') or {}).get('savedAt'),
                })
            except (OSError, ValueError, AttributeError) as e:
                log_store(f"Error reading map {json_file}: {e}")

        return summaries

    def delete_map(self, map_id: str) -> bool:
        """
        Delete a stored map.

        Returns:
            True if a file was deleted
        """
        file_path = self._map_path(map_id)
        if not file_path.exists():
            return False

        try:
            file_path.unlink()
        except OSError as e:
            log_store(f"Error deleting map {map_id}: {e}")
            return False
        return True

    # =========================================================================
    # IMPORT / EXPORT
    # =========================================================================

    def import_json(self, text: str) -> LoadedMap:
        """
        Import a map from JSON text and store it.

        Raises:
            MapFormatError: if the text is not JSON, lacks 'name'/'layers',
                or carries a map id that is not an integer string
        """
        try:
            document = json.loads(text)
        except ValueError as e:
            raise MapFormatError(f"Error parsing JSON file: {e}") from e

        map_data, paths = load_document(document)
        map_id = map_data.map_id or map_data.id
        if not is_valid_map_id(map_id):
            raise MapFormatError(f"Invalid map id {map_id!r}: map ids must be integers")

        try:
            with open(self._map_path(map_id), 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
        except OSError as e:
            log_store(f"Error storing imported map {map_id}: {e}")
        else:
            log_store(f"Imported map '{map_data.name}' ({map_id})")

        return map_data, paths

    @staticmethod
    def export_json(map_data: MapData, paths: PathGraph,
                    now: Optional[datetime] = None) -> str:
        return json.dumps(build_document(map_data, paths, now), indent=2)

    # =========================================================================
    # AUTO-SAVE
    # =========================================================================

    def autosave(self, map_data: MapData, paths: PathGraph, dirty: bool,
                 now: Optional[datetime] = None) -> bool:
        """
        Write the auto-save file.

        Skipped when nothing changed or the map was never named.

        Returns:
            True if the auto-save file was written
        """
        if not dirty or not map_data.name or map_data.name == DEFAULT_MAP_NAME:
            return False

        try:
            with open(self.autosave_path, 'w', encoding='utf-8') as f:
                json.dump(build_document(map_data, paths, now, autosave=True), f)
        except OSError as e:
            log_store(f"Auto-save failed: {e}")
            return False

        log_store(f"Auto-saved '{map_data.name}'")
        return True

    def recover_autosave(self, now: Optional[datetime] = None,
                         max_age: int = AUTOSAVE_MAX_AGE) -> Optional[Tuple[MapData, PathGraph, datetime]]:
        """
        Load the auto-save file if it is recent enough.

        Args:
            now: Current time (defaults to the current time, naive values are UTC)
            max_age: Maximum age in seconds

        Returns:
            (MapData, PathGraph, saved_at), or None if there is nothing to recover
        """
        if not self.autosave_path.exists():
            return None

        now = _as_utc(now or datetime.now(timezone.utc))
        try:
            with open(self.autosave_path, 'r', encoding='utf-8') as f:
                document = json.load(f)
            saved_at = _parse_iso(document['metadata']['savedAt'])
            map_data, paths = load_document(document)
        except (OSError, ValueError, KeyError, TypeError) as e:
            log_store(f"Ignoring unreadable auto-save: {e}")
            return None

        if (now - saved_at).total_seconds() >= max_age:
            return None

        return map_data, paths, saved_at
