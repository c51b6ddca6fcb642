from .log import write_log, write_message_to_log, save_log, clear_log, activate, deactivate, set_log_mode, \
    LOG_MODE_ERROR, LOG_MODE_INFO, LOG_MODE_DEBUG
from .exceptions import BVHError, BVHIOError, BVHSyntaxError, BVHConsistencyError, SkeletonConsistencyError
from .io_helper_functions import load_json_file, write_to_json_file
