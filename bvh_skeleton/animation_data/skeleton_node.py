"""
Joint and channel records of a skeleton.

Joints and channels refer to each other and to their parents by index into the
sequences owned by the Skeleton. They never hold references to other nodes.
"""
from collections import namedtuple
from .constants import CHANNEL_TYPES, channel_name

SKELETON_NODE_TYPE_ROOT = 0
SKELETON_NODE_TYPE_JOINT = 1


class SkeletonChannel(namedtuple("SkeletonChannel", ["joint", "type", "index"])):
    """One animated degree of freedom.

    * joint: index of the owning joint
    * type: one of the channel type constants
    * index: column of the channel in the motion matrix
    """
    __slots__ = ()

    @property
    def name(self):
        return channel_name(self.type)


class SkeletonJointNode(object):
    def __init__(self, node_name, index, parent=None, offset=(0.0, 0.0, 0.0), end_site=None,
                 channels=(), children=()):
        self.node_name = node_name
        self.index = index
        self.parent = parent
        self.offset = tuple(float(v) for v in offset)
        if end_site is not None:
            end_site = tuple(float(v) for v in end_site)
        self.end_site = end_site
        self.channels = tuple(channels)
        self.children = tuple(children)

    @property
    def name(self):
        return self.node_name

    @property
    def has_end_site(self):
        return self.end_site is not None

    @property
    def node_type(self):
        if self.parent is None:
            return SKELETON_NODE_TYPE_ROOT
        return SKELETON_NODE_TYPE_JOINT

    def copy(self):
        return SkeletonJointNode(self.node_name, self.index, self.parent, self.offset, self.end_site,
                                 self.channels, self.children)

    def __eq__(self, other):
        if not isinstance(other, SkeletonJointNode):
            return NotImplemented
        return (self.node_name, self.index, self.parent, self.offset, self.end_site, self.channels,
                self.children) == (other.node_name, other.index, other.parent, other.offset,
                                   other.end_site, other.channels, other.children)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return "SkeletonJointNode(%r, index=%d, parent=%r)" % (self.node_name, self.index, self.parent)


def is_valid_channel_type(channel_type):
    return channel_type in CHANNEL_TYPES


def is_valid_joint_name(node_name):
    """ A name survives writing and reading a BVH file when it is not empty,
        has no braces and its words are separated by single spaces
    """
    if not isinstance(node_name, str) or node_name == "":
        return False
    if "{" in node_name or "}" in node_name:
        return False
    return " ".join(node_name.split()) == node_name
