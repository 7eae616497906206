"""Names and fixed vocabularies shared across dirban."""

BOARDS_DIR = "boards"
UPLOADS_DIR = "uploads"

BOARD_FILE = "board.json"
CARD_FILE = "card.json"
DESCRIPTIONS_DIR = "descriptions"
DESCRIPTIONS_INDEX = "descriptions.json"
DESCRIPTION_PREFIX = "description_"
DESCRIPTION_SUFFIX = ".md"
THUMBNAILS_DIR = "thumbnails"

STATUSES = ("todo", "doing", "done")
DEFAULT_STATUS = "todo"

DESCRIPTION_TITLES = (
    "Overview",
    "Requirements",
    "Acceptance Criteria",
    "Implementation Notes",
    "Test Plan",
    "Notes",
)

# Directory entries never shown in listings
IGNORED_PREFIXES = (".", "__MACOSX")
