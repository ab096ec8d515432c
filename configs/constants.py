"""
Constants
"""

# Ignore pylint warnings
# pylint: disable = line-too-long


class Constants:
    """
    Constants configurations
    """

    POKEAPI_BASE_URL = "https://pokeapi.co/api/v2"
    USER_AGENT = "pokeapi-snapshots/1.0 (static-data-mirror)"

    # Where manifests and snapshot files are published
    PUBLIC_DIR = "public"
    MANIFEST_FILE = "manifest.json"

    # Listing page sizes: the probe only needs "count", the full listing
    # asks for everything in one page and follows "next" if the server caps it
    PROBE_PAGE_SIZE = 1
    LISTING_PAGE_SIZE = 100000

    DEFAULT_POOL_SIZE = 5
    PROGRESS_EVERY = 50
    REQUEST_TIMEOUT = 30

    PRIMARY_LANGUAGE = "es"
    FALLBACK_LANGUAGE = "en"

    RESOURCES = {
        "pokemon": {
            "endpoint": "pokemon",
            "directory": "pokemon",
            "url_key": "pokemon_url",
            "file_prefix": "pokemon_map",
            "pool_env": "POKEMON_POOL",
        },
        "abilities": {
            "endpoint": "ability",
            "directory": "abilities",
            "url_key": "ability_url",
            "file_prefix": "ability_map",
            "pool_env": "ABILITIES_POOL",
        },
        "moves": {
            "endpoint": "move",
            "directory": "moves",
            "url_key": "moves_url",
            "file_prefix": "move_es_map",
            "pool_env": "MOVES_POOL",
        },
    }
