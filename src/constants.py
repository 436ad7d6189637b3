"""Application constants."""

SERVICE_NAME = "sdk-smoke-harness"
SERVICE_VERSION = "0.1.0"

# Single-table key schema
PARTITION_KEY = "PK"
SORT_KEY = "SK"
INDEX_NAME = "GSI1"

# Probe table (provisioned with lowercase key attributes)
PROBE_PARTITION_KEY = "pk"
PROBE_SORT_KEY = "sk"
PROBE_TREE_KEY = "test"
RAW_RECORD_PK = "something"
RAW_RECORD_SK = "else"

# SQS
SQS_MAX_BATCH_SIZE = 10
SQS_BATCH_ENTRY_PREFIX = "msg-"

# S3
S3_LIST_PAGE_SIZE = 100
S3_EXCLUDED_KEY_MARKER = "result_"
S3_DEFAULT_CONTENT_TYPE = "application/json"
S3_SIGNED_URL_EXPIRY_SECONDS = 3600

# Probe payloads
PROBE_FILE_NAME = "file.txt"
PROBE_FILE_CONTENTS = "some text"
PROBE_MESSAGE_GROUP_ID = "group1"
PROBE_MESSAGE_BODY = "hello"
PROBE_SUCCESS_BODY = "Hello, World! Your request was received"
