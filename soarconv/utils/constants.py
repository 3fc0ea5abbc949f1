"""
Constants for the SOAR playbook converter.

Document discriminators, API path prefixes, well-known step type
identifiers and fallback argument keys used by both conversion directions.
"""

# Top-level document discriminators
FSR_DOCUMENT_TYPE = "workflow_collections"
FAS_DOCUMENT_TYPE = "playbook_collections"

# Conversion directions
DIRECTION_FSR_TO_FAS = "fsr-to-fas"
DIRECTION_FAS_TO_FSR = "fas-to-fsr"
DIRECTIONS = [DIRECTION_FSR_TO_FAS, DIRECTION_FAS_TO_FSR]

# FSR (absolute) API paths
FSR_STEP_PATH = "/api/3/workflow_steps/"
FSR_STEP_TYPE_PATH = "/api/3/workflow_step_types/"
FSR_COLLECTION_PATH = "/api/3/workflow_collections/"
FSR_PEOPLE_PATH = "/api/3/people/"
FSR_COLLECTION_CONTEXT = "/api/3/contexts/WorkflowCollection"

# FAS (relative) step reference prefix, used inside step arguments
FAS_STEP_PATH = "api/3/workflow_steps/"

# FAS resource identifiers
FAS_COLLECTION_ID_TEMPLATE = "/api/workflow/playbook-collections/{uuid}/"
FAS_PLAYBOOK_ID_TEMPLATE = "/api/workflow/playbooks/{uuid}/"
FAS_ROUTE_ID_TEMPLATE = "/api/workflow/playbook-routes/{uuid}/"

# FSR picklist defaults applied to converted workflows
FSR_DEFAULT_PRIORITY = "/api/3/picklists/2b563c61-ae2c-41c0-a85a-c9709585e3f2"
FSR_DEFAULT_PLAYBOOK_ORIGIN = "/api/3/picklists/15c1e8c9-22bf-4e66-8fbb-0a502d4a4a3f"
FAS_DEFAULT_PRIORITY = "medium"

# Well-known step types
SET_VARIABLE_STEP_TYPE = "04d0cf46-b6a8-42c4-8683-60a7eaa69e8f"
FAS_REFERENCED_START_STEP_TYPE = "b348f017-9a94-471f-87f8-ce88b6a7ad62"

# Argument keys holding a fallback-encoded original step
FALLBACK_ARGUMENT_KEY = "_tmp"
ORIGINAL_START_ARGUMENT_KEY = "_originalStartStep"

# Seconds/milliseconds disambiguation for numeric timestamps
EPOCH_MILLISECONDS_THRESHOLD = 10_000_000_000

# Canvas minimums applied when converting FAS playbooks to FSR workflows
DEFAULT_MIN_TOP = 30
DEFAULT_MIN_LEFT = 300

# Default configuration paths
DEFAULT_CONFIG_PATH = "soarconv_config.json"
DEFAULT_TRACE_LOG_DIR = "trace_logs"

# Version snapshot metadata
VERSION_SNAPSHOT_NAME = "Version 1"
VERSION_SNAPSHOT_NOTE = "Converted from FSR"
