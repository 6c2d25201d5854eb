"""Identifiers of the OPT extension on the A2A wire."""

OPT_EXTENSION_URI = "https://github.com/zeroasterisk/a2a-opt/v1"

# HTTP header listing the A2A extensions a request activates.
A2A_EXTENSIONS_HEADER = "X-A2A-Extensions"

OPT_METADATA_PREFIX = "opt/v1/"

METADATA_OBJECTIVE_ID = f"{OPT_METADATA_PREFIX}objectiveId"
METADATA_PLAN_ID = f"{OPT_METADATA_PREFIX}planId"
METADATA_TASK_INDEX = f"{OPT_METADATA_PREFIX}taskIndex"
METADATA_DEPENDENCIES = f"{OPT_METADATA_PREFIX}dependencies"
METADATA_OBJECTIVE = f"{OPT_METADATA_PREFIX}objective"
METADATA_PLAN = f"{OPT_METADATA_PREFIX}plan"
