"""
Programmatic construction of skeletons.

Joints can be added in any order as long as the parent already exists. The
hierarchy is renumbered in preorder when it is built, so joint indices and
channel columns always follow the order in which a BVH file would list them.
"""
import numpy as np
from .constants import channel_type_from_name, channel_name, OFFSET_LEN
from .skeleton_node import SkeletonJointNode, SkeletonChannel, is_valid_channel_type
from ..utilities.exceptions import SkeletonConsistencyError
from ..utilities.io_helper_functions import load_json_file
from ..utilities.log import write_message_to_log, LOG_MODE_DEBUG


def _to_vector(values, description):
    vector = tuple(float(v) for v in values)
    if len(vector) != OFFSET_LEN:
        raise SkeletonConsistencyError("%s needs %d values but got %d" % (description, OFFSET_LEN, len(vector)))
    return vector


def _to_channel_type(channel):
    if isinstance(channel, str):
        channel_type = channel_type_from_name(channel)
        if channel_type is None:
            raise SkeletonConsistencyError("Unknown channel type " + channel)
        return channel_type
    if not is_valid_channel_type(channel):
        raise SkeletonConsistencyError("Unknown channel type " + str(channel))
    return channel


class SkeletonBuilder(object):
    def __init__(self):
        self._nodes = []
        self._root = None

    def clear(self):
        self._nodes = []
        self._root = None

    def add_root(self, node_name, offset=(0.0, 0.0, 0.0)):
        if self._root is not None:
            raise SkeletonConsistencyError("The skeleton already has the root " + self._nodes[self._root]["name"])
        self._root = self._add_node(node_name, None, offset)
        return self._root

    def add_joint(self, node_name, parent, offset=(0.0, 0.0, 0.0)):
        if parent is None or not 0 <= parent < len(self._nodes):
            raise SkeletonConsistencyError("Unknown parent joint %s for %s" % (parent, node_name))
        node_id = self._add_node(node_name, parent, offset)
        self._nodes[parent]["children"].append(node_id)
        return node_id

    def _add_node(self, node_name, parent, offset):
        self._nodes.append({"name": node_name,
                            "parent": parent,
                            "offset": _to_vector(offset, "The offset of " + node_name),
                            "end_site": None,
                            "channels": [],
                            "children": []})
        return len(self._nodes) - 1

    def set_offset(self, node_id, offset):
        node = self._nodes[node_id]
        node["offset"] = _to_vector(offset, "The offset of " + node["name"])

    def set_end_site(self, node_id, offset):
        node = self._nodes[node_id]
        node["end_site"] = _to_vector(offset, "The end site of " + node["name"])

    def has_end_site(self, node_id):
        return self._nodes[node_id]["end_site"] is not None

    def add_channels(self, node_id, channels):
        """ channels can be given as type constants or as BVH names like Zrotation
        """
        node = self._nodes[node_id]
        node["channels"] += [_to_channel_type(c) for c in channels]

    def get_number_of_joints(self):
        return len(self._nodes)

    def get_number_of_channels(self):
        return sum(len(node["channels"]) for node in self._nodes)

    def build_hierarchy(self):
        """ Returns the joint and channel lists numbered in preorder
        """
        if self._root is None:
            raise SkeletonConsistencyError("The skeleton has no root joint")
        order = []
        self._collect_preorder(self._root, order)
        new_index = {node_id: idx for idx, node_id in enumerate(order)}
        joints = []
        channels = []
        for node_id in order:
            node = self._nodes[node_id]
            joint_index = new_index[node_id]
            channel_indices = []
            for channel_type in node["channels"]:
                channel_indices.append(len(channels))
                channels.append(SkeletonChannel(joint_index, channel_type, len(channels)))
            parent = node["parent"]
            if parent is not None:
                parent = new_index[parent]
            joints.append(SkeletonJointNode(node["name"], joint_index, parent, node["offset"], node["end_site"],
                                            channel_indices, [new_index[c] for c in node["children"]]))
        return joints, channels

    def _collect_preorder(self, node_id, order):
        order.append(node_id)
        for c in self._nodes[node_id]["children"]:
            self._collect_preorder(c, order)

    def build(self, n_frames=0, frame_time=0.0, motion=None, name=""):
        """ Creates a Skeleton from the added joints.

        Parameters
        ----------
        * n_frames: int
        \tNumber of frames of the motion
        * frame_time: float
        \tTime in seconds between two frames
        * motion: array-like or None
        \tMotion values with one column per channel in preorder channel order.
        \tIf None the motion is filled with zeros.
        * name: string
        \tMotion name of the skeleton
        """
        from .skeleton import Skeleton
        joints, channels = self.build_hierarchy()
        skeleton = Skeleton()
        skeleton.init(name, joints, channels, n_frames, frame_time, motion)
        return skeleton

    def load_from_json_file(self, filename):
        data = load_json_file(filename)
        return self.load_from_json_data(data)

    def load_from_json_data(self, data):
        """ Builds a skeleton from the description created by Skeleton.to_json_data
        """
        write_message_to_log("load skeleton from json", LOG_MODE_DEBUG)
        self.clear()
        self._create_node_from_desc(data["root"], None)
        frames = np.array(data.get("frames", []), dtype=np.float64)
        n_frames = data.get("n_frames", len(frames))
        return self.build(n_frames, data.get("frame_time", 0.0), frames, data.get("motion_name", ""))

    def _create_node_from_desc(self, node_desc, parent):
        offset = node_desc.get("offset", (0.0, 0.0, 0.0))
        if parent is None:
            node_id = self.add_root(node_desc["name"], offset)
        else:
            node_id = self.add_joint(node_desc["name"], parent, offset)
        self.add_channels(node_id, node_desc.get("channels", []))
        if node_desc.get("end_site") is not None:
            self.set_end_site(node_id, node_desc["end_site"])
        for c_desc in node_desc.get("children", []):
            self._create_node_from_desc(c_desc, node_id)
        return node_id


def get_node_desc(skeleton, joint):
    """ Recursive json compatible description of a joint and its subtree
    """
    node_desc = dict()
    node_desc["name"] = joint.node_name
    node_desc["offset"] = list(joint.offset)
    node_desc["channels"] = [channel_name(skeleton.get_channel(c).type) for c in joint.channels]
    node_desc["end_site"] = list(joint.end_site) if joint.has_end_site else None
    node_desc["children"] = [get_node_desc(skeleton, skeleton.get_joint(c)) for c in joint.children]
    return node_desc
