# -*- coding: utf-8 -*-
"""
Skeleton and motion data of a BVH file.

The Skeleton owns flat sequences of joints and channels, a name index and the
motion matrix. It is filled as a whole by init(), which every loading path goes
through, so a skeleton that reports a successful load always satisfies:

* exactly one root joint at index 0 and joint indices in preorder
* channel indices numbered in preorder declaration order
* one motion column per channel
"""

import os
import numpy as np
from .bvh import BVHReader, BVHWriter
from .constants import ROTATION_CHANNELS, POSITION_CHANNELS, OFFSET_LEN, channel_name
from .skeleton_node import SkeletonJointNode, SkeletonChannel, is_valid_channel_type, is_valid_joint_name
from .skeleton_builder import get_node_desc
from ..utilities.exceptions import BVHError, SkeletonConsistencyError
from ..utilities.io_helper_functions import write_to_json_file
from ..utilities.log import write_message_to_log, LOG_MODE_DEBUG, LOG_MODE_ERROR


class Skeleton(object):
    """ Data structure that stores the joint hierarchy and the motion
        extracted from a BVH file.
    """
    def __init__(self, filename=None):
        self.clear()
        if filename is not None:
            self.load(filename)

    def clear(self):
        self._load_success = False
        self.filename = ""
        self.motion_name = ""
        self.frame_time = 0.0
        self._joints = []
        self._channels = []
        self._joint_index = dict()
        self._motion = np.zeros((0, 0))

    def init(self, name, joints, channels, n_frames, frame_time, motion=None):
        """ Replaces hierarchy and motion of the skeleton.

        Parameters
        ----------
        * name: string
        \tMotion name
        * joints: list of SkeletonJointNode
        \tJoints indexed in preorder
        * channels: list of SkeletonChannel
        \tChannels indexed in preorder declaration order
        * n_frames: int
        \tNumber of frames
        * frame_time: float
        \tTime in seconds between two frames
        * motion: array-like or None
        \tEither n_frames * n_channels values in frame-major order or an
        \tarray of shape (n_frames, n_channels). Zeros are used if None.

        Raises SkeletonConsistencyError and leaves the skeleton empty if the
        data is inconsistent.
        """
        filename = self.filename
        self.clear()
        try:
            joints = [self._copy_joint(j) for j in joints]
            channels = [SkeletonChannel(*c) for c in channels]
            _check_hierarchy(joints, channels)
            motion = _create_motion_buffer(n_frames, len(channels), motion)
            frame_time = float(frame_time)
            if not frame_time >= 0.0:
                raise SkeletonConsistencyError("Frame time has to be positive but is " + str(frame_time))
        except (SkeletonConsistencyError, TypeError, ValueError) as e:
            self.clear()
            write_message_to_log("Error: skeleton " + str(name) + " is inconsistent: " + str(e), LOG_MODE_ERROR)
            if isinstance(e, SkeletonConsistencyError):
                raise
            raise SkeletonConsistencyError(str(e))

        self.filename = filename
        self.motion_name = name
        self.frame_time = frame_time
        self._joints = joints
        self._channels = channels
        self._motion = motion
        # duplicate names: the joint registered last wins
        self._joint_index = {j.node_name: j for j in joints}
        self._load_success = True

    def _copy_joint(self, joint):
        if not isinstance(joint, SkeletonJointNode):
            raise SkeletonConsistencyError("Expected a SkeletonJointNode but got " + type(joint).__name__)
        return joint.copy()

    def set_skeleton(self, name, joints, channels):
        """ Sets the hierarchy and resets the motion to zero frames
        """
        self.init(name, joints, channels, 0, self.frame_time)

    def set_motion(self, n_frames, frame_time, motion=None):
        """ Replaces the whole motion buffer, keeping the hierarchy
        """
        if not self._load_success:
            raise SkeletonConsistencyError("Cannot set the motion of an empty skeleton")
        self.init(self.motion_name, self._joints, self._channels, n_frames, frame_time, motion)

    def load(self, filename):
        """ Reads a BVH file. On failure the skeleton is left empty and the error is raised.
        """
        self.clear()
        try:
            bvh_reader = BVHReader(filename)
            self._init_from_reader(bvh_reader, os.path.splitext(bvh_reader.filename)[0])
        except BVHError as e:
            self.clear()
            write_message_to_log("Error: could not load " + str(filename) + ": " + str(e), LOG_MODE_ERROR)
            raise
        self.filename = str(filename)
        write_message_to_log("loaded " + self.filename, LOG_MODE_DEBUG)
        return self

    def loads(self, bvh_string, name=""):
        """ Reads BVH data from a string
        """
        self.clear()
        try:
            bvh_reader = BVHReader.init_from_string(bvh_string)
            self._init_from_reader(bvh_reader, name)
        except BVHError as e:
            self.clear()
            write_message_to_log("Error: could not load BVH string: " + str(e), LOG_MODE_ERROR)
            raise
        return self

    def _init_from_reader(self, bvh_reader, name):
        self.init(name, bvh_reader.joints, bvh_reader.channels, bvh_reader.n_frames, bvh_reader.frame_time,
                  bvh_reader.frames)

    def save(self, filename, config=None):
        """ Writes the skeleton and the motion as BVH file and returns the written file name
        """
        return BVHWriter(None, self, config).write(filename)

    def to_bvh_string(self, config=None):
        return BVHWriter(None, self, config).generate_bvh_string()

    def to_json_data(self):
        if not self._load_success:
            raise SkeletonConsistencyError("Cannot export an empty skeleton")
        data = dict()
        data["motion_name"] = self.motion_name
        data["frame_time"] = self.frame_time
        data["n_frames"] = self.get_num_frames()
        data["root"] = get_node_desc(self, self.get_root())
        data["frames"] = self._motion.tolist()
        return data

    def save_to_json(self, filename):
        write_to_json_file(filename, self.to_json_data())

    def is_load_success(self):
        return self._load_success

    def get_filename(self):
        return self.filename

    def get_motion_name(self):
        return self.motion_name

    def get_num_joints(self):
        return len(self._joints)

    def get_joint(self, index):
        if not 0 <= index < len(self._joints):
            raise IndexError("Joint index %d out of range" % index)
        return self._joints[index]

    def get_joint_by_name(self, node_name):
        return self._joint_index.get(node_name)

    def get_joints(self):
        return list(self._joints)

    def get_root(self):
        return self.get_joint(0)

    def get_num_channels(self):
        return len(self._channels)

    def get_stride(self):
        return self._motion.shape[1]

    def get_channel(self, index):
        if not 0 <= index < len(self._channels):
            raise IndexError("Channel index %d out of range" % index)
        return self._channels[index]

    def get_channels(self):
        return list(self._channels)

    def get_num_frames(self):
        return self._motion.shape[0]

    def get_frame_time(self):
        return self.frame_time

    def get_fps(self):
        if self.frame_time == 0.0:
            return None
        return 1.0 / self.frame_time

    def get_animation_time(self):
        return self.get_num_frames() * self.frame_time

    def get_motion(self):
        """ Returns a read-only view of the motion with shape (n_frames, n_channels)
        """
        view = self._motion.view()
        view.flags.writeable = False
        return view

    def get_motion_at(self, frame_idx, channel_idx):
        self._check_motion_index(frame_idx, channel_idx)
        return float(self._motion[frame_idx, channel_idx])

    def set_motion_at(self, frame_idx, channel_idx, value):
        self._check_motion_index(frame_idx, channel_idx)
        self._motion[frame_idx, channel_idx] = value

    def _check_motion_index(self, frame_idx, channel_idx):
        n_frames, n_channels = self._motion.shape
        if not 0 <= frame_idx < n_frames:
            raise IndexError("Frame index %d out of range" % frame_idx)
        if not 0 <= channel_idx < n_channels:
            raise IndexError("Channel index %d out of range" % channel_idx)

    def _resolve_joint(self, joint):
        """ Accepts a joint, a joint name or a joint index. None if the name is
            unknown or the index is out of range
        """
        if isinstance(joint, SkeletonJointNode):
            return joint
        if isinstance(joint, str):
            return self.get_joint_by_name(joint)
        if not 0 <= joint < len(self._joints):
            return None
        return self._joints[joint]

    def get_parent(self, joint):
        joint = self._resolve_joint(joint)
        if joint is None or joint.parent is None:
            return None
        return self._joints[joint.parent]

    def get_children(self, joint):
        joint = self._resolve_joint(joint)
        if joint is None:
            return []
        return [self._joints[c] for c in joint.children]

    def get_joint_channels(self, joint):
        joint = self._resolve_joint(joint)
        if joint is None:
            return []
        return [self._channels[c] for c in joint.channels]

    def get_channel_names(self, joint):
        return [channel_name(c.type) for c in self.get_joint_channels(joint)]

    def _get_channel_values(self, joint, frame_idx, channel_types):
        """ Returns the values of the three channel types or None if one of them is missing
        """
        joint = self._resolve_joint(joint)
        if joint is None or not 0 <= frame_idx < self.get_num_frames():
            return None
        values = []
        for channel_type in channel_types:
            column = self._find_channel(joint, channel_type)
            if column is None:
                return None
            values.append(float(self._motion[frame_idx, column]))
        return tuple(values)

    def _find_channel(self, joint, channel_type):
        for c in joint.channels:
            if self._channels[c].type == channel_type:
                return c
        return None

    def get_rotation(self, joint, frame_idx):
        """ Returns the (x, y, z) rotation channel values of a joint in a frame.
        None if the joint or the frame is out of range or the joint lacks one of the rotation channels.
        """
        return self._get_channel_values(joint, frame_idx, ROTATION_CHANNELS)

    def get_position(self, joint, frame_idx):
        """ Returns the (x, y, z) position channel values of a joint in a frame.
        None if the joint or the frame is out of range or the joint lacks one of the position channels.
        """
        return self._get_channel_values(joint, frame_idx, POSITION_CHANNELS)

    def get_angles(self, *node_channels):
        """Returns numpy array of values in all frames for specified channels

        Parameters
        ----------
         * node_channels: 2-tuples of strings
        \tEach tuple contains joint name and channel name
        \te.g. ("hip", "Xposition")

        """
        index = {(self._joints[c.joint].node_name, channel_name(c.type)): c.index for c in self._channels}
        indices = [index[nc] for nc in node_channels]
        return self._motion[:, indices]

    def get_joint_names(self):
        return [j.node_name for j in self._joints]

    def get_animated_joints(self):
        """Returns an ordered list of joints which have animation channels"""
        return [j.node_name for j in self._joints if len(j.channels) > 0]

    def get_parent_dict(self):
        """Returns a dict of node names to their parent node's name"""
        parent_dict = dict()
        for j in self._joints:
            if j.parent is not None:
                parent_dict[j.node_name] = self._joints[j.parent].node_name
        return parent_dict

    def gen_all_parents(self, node_name):
        joint = self.get_parent(node_name)
        while joint is not None:
            yield joint.node_name
            joint = self.get_parent(joint)

    def get_level(self, joint):
        joint = self._resolve_joint(joint)
        if joint is None:
            return None
        level = 0
        while joint.parent is not None:
            joint = self._joints[joint.parent]
            level += 1
        return level

    def get_max_level(self):
        if not self._joints:
            return -1
        levels = [0] * len(self._joints)
        for j in self._joints[1:]:
            levels[j.index] = levels[j.parent] + 1
        return max(levels)


def _create_motion_buffer(n_frames, n_channels, motion):
    if int(n_frames) != n_frames or n_frames < 0:
        raise SkeletonConsistencyError("Invalid number of frames " + str(n_frames))
    n_frames = int(n_frames)
    if motion is None:
        return np.zeros((n_frames, n_channels))
    motion = np.array(motion, dtype=np.float64)
    if motion.ndim == 2 and motion.shape != (n_frames, n_channels):
        raise SkeletonConsistencyError("Motion has shape %s but expected (%d, %d)"
                                       % (motion.shape, n_frames, n_channels))
    if motion.ndim > 2 or motion.size != n_frames * n_channels:
        raise SkeletonConsistencyError("Motion has %d values but expected %d"
                                       % (motion.size, n_frames * n_channels))
    return motion.reshape((n_frames, n_channels))


def _check_hierarchy(joints, channels):
    """ Raises SkeletonConsistencyError unless joints and channels form a single
        rooted tree numbered in preorder with channels numbered in declaration order
    """
    n_joints = len(joints)
    if n_joints == 0:
        raise SkeletonConsistencyError("The skeleton has no joints")
    for idx, joint in enumerate(joints):
        if joint.index != idx:
            raise SkeletonConsistencyError("Joint %s has index %s at position %d" % (joint.node_name, joint.index, idx))
        if not is_valid_joint_name(joint.node_name):
            raise SkeletonConsistencyError("Joint %d has a name that cannot be written to BVH: %r" % (idx, joint.node_name))
        if len(joint.offset) != OFFSET_LEN or (joint.has_end_site and len(joint.end_site) != OFFSET_LEN):
            raise SkeletonConsistencyError("Joint %s needs offsets with %d values" % (joint.node_name, OFFSET_LEN))
        if joint.parent is None:
            if idx != 0:
                raise SkeletonConsistencyError("Joint %s is a second root" % joint.node_name)
        elif not 0 <= joint.parent < n_joints or joint.parent == idx:
            raise SkeletonConsistencyError("Joint %s has an invalid parent %s" % (joint.node_name, joint.parent))
        elif idx not in joints[joint.parent].children:
            raise SkeletonConsistencyError("Joint %s is not a child of its parent" % joint.node_name)
        for c in joint.children:
            if not 0 <= c < n_joints or joints[c].parent != idx:
                raise SkeletonConsistencyError("Joint %s has an invalid child %s" % (joint.node_name, c))
    if joints[0].parent is not None:
        raise SkeletonConsistencyError("The first joint has to be the root")

    order = []
    stack = [0]
    while stack:
        idx = stack.pop()
        order.append(idx)
        if len(order) > n_joints:
            raise SkeletonConsistencyError("The joint hierarchy contains a cycle")
        stack.extend(reversed(joints[idx].children))
    if order != list(range(n_joints)):
        raise SkeletonConsistencyError("Joint indices are not in preorder")

    for idx, channel in enumerate(channels):
        if channel.index != idx:
            raise SkeletonConsistencyError("Channel at position %d has index %s" % (idx, channel.index))
        if not is_valid_channel_type(channel.type):
            raise SkeletonConsistencyError("Channel %d has an unknown type %s" % (idx, channel.type))
        if not 0 <= channel.joint < n_joints or idx not in joints[channel.joint].channels:
            raise SkeletonConsistencyError("Channel %d is not bound to its joint %s" % (idx, channel.joint))
    declared = []
    for joint in joints:
        for c in joint.channels:
            if not 0 <= c < len(channels) or channels[c].joint != joint.index:
                raise SkeletonConsistencyError("Joint %s refers to a foreign channel %s" % (joint.node_name, c))
            declared.append(c)
    if declared != list(range(len(channels))):
        raise SkeletonConsistencyError("Channel indices are not in declaration order")
