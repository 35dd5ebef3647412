"""Gambit pack editing engine.

Imports monster gambit pack JSON into an editable model, applies edits, and
writes the model back into the JSON text without disturbing anything the
model does not cover. Rendering, dialogs and file pickers belong to the host
application.
"""

from .catalog import ActionCatalog, load_action_catalog
from .importer import import_pack  # JSON text -> model
from .issues import GambitDocumentError, IssueSeverity, LoadIssue
from .model import Condition, GambitPackDocument, GambitRule, LoopCount, MonsterEntry, PackType
from .session import EditingSession, HostSurface, TextBuffer
from .synchronizer import synchronize  # model -> JSON text
