""" Channel types, file keywords and writer defaults of the BVH format.
"""
import collections
from ..utilities.io_helper_functions import load_json_file

X_ROTATION = 0
Y_ROTATION = 1
Z_ROTATION = 2
X_POSITION = 3
Y_POSITION = 4
Z_POSITION = 5

CHANNEL_TYPES = (X_ROTATION, Y_ROTATION, Z_ROTATION, X_POSITION, Y_POSITION, Z_POSITION)
ROTATION_CHANNELS = (X_ROTATION, Y_ROTATION, Z_ROTATION)
POSITION_CHANNELS = (X_POSITION, Y_POSITION, Z_POSITION)

CHANNEL_NAMES = collections.OrderedDict([(X_ROTATION, "Xrotation"),
                                         (Y_ROTATION, "Yrotation"),
                                         (Z_ROTATION, "Zrotation"),
                                         (X_POSITION, "Xposition"),
                                         (Y_POSITION, "Yposition"),
                                         (Z_POSITION, "Zposition")])
CHANNEL_TYPE_MAP = {name.lower(): channel_type for channel_type, name in CHANNEL_NAMES.items()}

_LONG_NAMES = {X_ROTATION: "X Rotation", Y_ROTATION: "Y Rotation", Z_ROTATION: "Z Rotation",
               X_POSITION: "X Position", Y_POSITION: "Y Position", Z_POSITION: "Z Position"}
_SHORT_NAMES = {X_ROTATION: "XR", Y_ROTATION: "YR", Z_ROTATION: "ZR",
                X_POSITION: "XP", Y_POSITION: "YP", Z_POSITION: "ZP"}

KEYWORD_HIERARCHY = "HIERARCHY"
KEYWORD_ROOT = "ROOT"
KEYWORD_JOINT = "JOINT"
KEYWORD_OFFSET = "OFFSET"
KEYWORD_CHANNELS = "CHANNELS"
KEYWORD_END = "End"
KEYWORD_SITE = "Site"
KEYWORD_MOTION = "MOTION"
KEYWORD_FRAMES = "Frames:"
KEYWORD_FRAME = "Frame"
KEYWORD_TIME = "Time:"

OFFSET_LEN = 3

DEFAULT_BVH_WRITER_CONFIG = {
    "indent": "\t",
    "float_format": None,
    "frame_time_format": None,
    "append_extension": True
}


def stringify(channel_type):
    return _LONG_NAMES.get(channel_type, "Unknown")


def short_stringify(channel_type):
    return _SHORT_NAMES.get(channel_type, "UU")


def channel_name(channel_type):
    """Returns the token used for the channel type in BVH files, e.g. Xrotation"""
    return CHANNEL_NAMES[channel_type]


def channel_type_from_name(name):
    """Returns the channel type for a BVH channel token or None if it is unknown.
    The lookup ignores case so XROTATION and Xrotation are equivalent.
    """
    return CHANNEL_TYPE_MAP.get(name.lower())


def load_bvh_writer_config(filename):
    """ Reads writer settings from a json file and fills missing keys with the defaults
    """
    data = load_json_file(filename)
    return merge_bvh_writer_config(data)


def merge_bvh_writer_config(config=None):
    merged = dict(DEFAULT_BVH_WRITER_CONFIG)
    if config is None:
        return merged
    for key, value in config.items():
        if key not in DEFAULT_BVH_WRITER_CONFIG:
            raise KeyError("Unknown writer setting " + str(key))
        merged[key] = value
    return merged
