import os
import sys
import pytest
import numpy as np
ROOT_DIR = os.sep.join(os.path.realpath(__file__).split(os.sep)[:-3]) + os.sep
sys.path.append(ROOT_DIR)
TEST_LIB_PATH = ROOT_DIR + 'test'
sys.path.append(TEST_LIB_PATH)
from bvh_skeleton.animation_data import load_bvh, load_bvh_from_string
from bvh_skeleton.animation_data.skeleton import Skeleton
from bvh_skeleton.animation_data.skeleton_node import SkeletonJointNode, SkeletonChannel
from bvh_skeleton.animation_data.constants import X_ROTATION, Y_ROTATION, Z_ROTATION, X_POSITION
from bvh_skeleton.utilities.exceptions import BVHSyntaxError, BVHConsistencyError, BVHIOError, \
    SkeletonConsistencyError
from libtest import params, pytest_generate_tests
TEST_DATA_PATH = ROOT_DIR + 'test_data' + os.sep + 'animation_data'

HIPS_ONLY = """HIERARCHY
ROOT Hips
{
  OFFSET 0.0 0.0 0.0
  CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation
}
MOTION
Frames: 2
Frame Time: 0.0333
0 0 0 0 0 0
0 1 0 0 0 0
"""


def create_chain_joints():
    """root with the channels 0-2 and a child with channel 3"""
    joints = [SkeletonJointNode("root", 0, None, channels=(0, 1, 2), children=(1,)),
              SkeletonJointNode("child", 1, 0, offset=(0.0, 1.0, 0.0), end_site=(0.0, 1.0, 0.0), channels=(3,))]
    channels = [SkeletonChannel(0, X_ROTATION, 0), SkeletonChannel(0, Y_ROTATION, 1),
                SkeletonChannel(0, Z_ROTATION, 2), SkeletonChannel(1, X_POSITION, 3)]
    return joints, channels


def create_invalid_cases():
    cases = []
    joints, channels = create_chain_joints()
    cases.append({'joints': joints, 'channels': channels, 'motion': [0.0] * 7})
    joints, channels = create_chain_joints()
    cases.append({'joints': joints, 'channels': channels[:3], 'motion': None})
    joints, channels = create_chain_joints()
    joints[1].parent = None
    cases.append({'joints': joints, 'channels': channels, 'motion': None})
    joints, channels = create_chain_joints()
    joints.reverse()
    cases.append({'joints': joints, 'channels': channels, 'motion': None})
    joints, channels = create_chain_joints()
    channels[3] = SkeletonChannel(0, X_POSITION, 3)
    cases.append({'joints': joints, 'channels': channels, 'motion': None})
    joints, channels = create_chain_joints()
    channels[0] = SkeletonChannel(0, 17, 0)
    cases.append({'joints': joints, 'channels': channels, 'motion': None})
    joints, channels = create_chain_joints()
    joints[0].channels = (1, 0, 2)
    cases.append({'joints': joints, 'channels': channels, 'motion': None})
    cases.append({'joints': [], 'channels': [], 'motion': None})
    for node_name in ["", "a{b", "b}", "two  spaces", " padded", "line\nbreak", "tab\tname"]:
        joints, channels = create_chain_joints()
        joints[1].node_name = node_name
        cases.append({'joints': joints, 'channels': channels, 'motion': None})
    return cases


class TestHipsOnly(object):

    def setup_class(self):
        self.skeleton = Skeleton(TEST_DATA_PATH + os.sep + 'hips_only.bvh')

    def test_load(self):
        assert self.skeleton.is_load_success()
        assert self.skeleton.get_num_frames() == 2
        assert self.skeleton.get_num_channels() == 6
        assert self.skeleton.get_stride() == 6
        assert self.skeleton.get_num_joints() == 1
        assert self.skeleton.get_motion_name() == "hips_only"
        assert self.skeleton.get_frame_time() == 0.0333

    def test_joint(self):
        hips = self.skeleton.get_joint_by_name("Hips")
        assert hips is self.skeleton.get_joint(0)
        assert hips.index == 0
        assert len(hips.channels) == 6
        assert self.skeleton.get_parent(hips) is None

    def test_position(self):
        hips = self.skeleton.get_joint(0)
        assert self.skeleton.get_position(hips, 1) == (0.0, 1.0, 0.0)

    def test_rotation(self):
        assert self.skeleton.get_rotation("Hips", 1) == (0.0, 0.0, 0.0)

    def test_load_from_string(self):
        skeleton = load_bvh_from_string(HIPS_ONLY, "hips")
        assert skeleton.get_motion_name() == "hips"
        assert np.array_equal(skeleton.get_motion(), self.skeleton.get_motion())


class TestSkeleton(object):

    def setup_class(self):
        self.skeleton = load_bvh(TEST_DATA_PATH + os.sep + 'walk_short.bvh')

    def test_channel_column_equality(self):
        n_joint_channels = sum(len(j.channels) for j in self.skeleton.get_joints())
        assert self.skeleton.get_num_channels() == n_joint_channels == self.skeleton.get_motion().shape[1]
        assert self.skeleton.get_motion().size == self.skeleton.get_num_frames() * self.skeleton.get_num_channels()

    def test_index_uniqueness(self):
        assert sorted(j.index for j in self.skeleton.get_joints()) == list(range(self.skeleton.get_num_joints()))
        assert sorted(c.index for c in self.skeleton.get_channels()) == list(range(self.skeleton.get_num_channels()))

    param_rotation = [{'node_name': 'Hips', 'frame': 1, 'res': (20.0, 30.0, 10.0)},
                      {'node_name': 'Spine', 'frame': 0, 'res': (2.0, 3.0, 1.0)},
                      {'node_name': 'Head', 'frame': 2, 'res': (4.2, 5.2, 6.2)},
                      {'node_name': 'RightFoot', 'frame': 2, 'res': (0.7, 0.95, 0.45)}]

    @params(param_rotation)
    def test_get_rotation(self, node_name, frame, res):
        rotation = self.skeleton.get_rotation(self.skeleton.get_joint_by_name(node_name), frame)
        assert np.allclose(rotation, res)

    param_out_of_range = [{'frame': 3}, {'frame': 100}, {'frame': -1}]

    @params(param_out_of_range)
    def test_frame_out_of_range(self, frame):
        assert self.skeleton.get_rotation("Hips", frame) is None
        assert self.skeleton.get_position("Hips", frame) is None

    def test_missing_position_channels(self):
        assert self.skeleton.get_position("Spine", 0) is None
        assert self.skeleton.get_position(1, 0) is None

    def test_get_position(self):
        assert self.skeleton.get_position("Hips", 2) == (3.0, 91.0, -4.0)

    def test_get_joint_out_of_range(self):
        with pytest.raises(IndexError):
            self.skeleton.get_joint(7)
        with pytest.raises(IndexError):
            self.skeleton.get_joint(-1)
        with pytest.raises(IndexError):
            self.skeleton.get_channel(24)

    def test_get_joint_by_unknown_name(self):
        assert self.skeleton.get_joint_by_name("Tail") is None

    param_unknown_joints = [{'joint': 7}, {'joint': -1}, {'joint': "Tail"}]

    @params(param_unknown_joints)
    def test_query_unknown_joint(self, joint):
        assert self.skeleton.get_rotation(joint, 0) is None
        assert self.skeleton.get_position(joint, 0) is None
        assert self.skeleton.get_parent(joint) is None
        assert self.skeleton.get_children(joint) == []
        assert self.skeleton.get_joint_channels(joint) == []
        assert self.skeleton.get_level(joint) is None

    def test_motion_access(self):
        assert self.skeleton.get_motion_at(1, 3) == 10.0
        with pytest.raises(IndexError):
            self.skeleton.get_motion_at(3, 0)
        with pytest.raises(IndexError):
            self.skeleton.get_motion_at(0, 24)
        with pytest.raises(IndexError):
            self.skeleton.get_motion_at(-1, 0)

    def test_set_motion_at(self):
        skeleton = load_bvh(TEST_DATA_PATH + os.sep + 'walk_short.bvh')
        skeleton.set_motion_at(2, 7, 42.0)
        assert skeleton.get_motion_at(2, 7) == 42.0
        assert skeleton.get_rotation("Spine", 2)[0] == 42.0
        with pytest.raises(IndexError):
            skeleton.set_motion_at(0, 30, 1.0)

    def test_motion_is_read_only(self):
        with pytest.raises(ValueError):
            self.skeleton.get_motion()[0, 0] = 1.0

    def test_joint_topology(self):
        assert self.skeleton.get_joint_names() == ['Hips', 'Spine', 'Head', 'LeftUpLeg', 'LeftFoot', 'RightUpLeg',
                                                   'RightFoot']
        assert [j.node_name for j in self.skeleton.get_children("Hips")] == ['Spine', 'LeftUpLeg', 'RightUpLeg']
        assert self.skeleton.get_parent("LeftFoot").node_name == "LeftUpLeg"
        assert self.skeleton.get_max_level() == 2
        assert self.skeleton.get_level("Head") == 2

    param_get_parent_dict = [{'res': {'Head': 'Spine'}},
                             {'res': {'RightFoot': 'RightUpLeg', 'Spine': 'Hips'}}]

    @params(param_get_parent_dict)
    def test_get_parent_dict(self, res):
        parent_dict = self.skeleton.get_parent_dict()
        assert "Hips" not in parent_dict
        for key, value in res.items():
            assert parent_dict[key] == value

    def test_gen_all_parents(self):
        assert list(self.skeleton.gen_all_parents("LeftFoot")) == ["LeftUpLeg", "Hips"]
        assert list(self.skeleton.gen_all_parents("Hips")) == []

    def test_channel_names(self):
        assert self.skeleton.get_channel_names("Head") == ["Xrotation", "Yrotation", "Zrotation"]
        assert self.skeleton.get_animated_joints() == self.skeleton.get_joint_names()

    def test_get_angles(self):
        angles = self.skeleton.get_angles(("Hips", "Yposition"), ("Spine", "Zrotation"))
        assert angles.shape == (3, 2)
        assert np.allclose(angles[:, 0], [90.0, 90.5, 91.0])
        assert np.allclose(angles[:, 1], [1.0, 1.1, 1.2])

    def test_timing(self):
        assert np.isclose(self.skeleton.get_animation_time(), 3 * 0.033333)
        assert np.isclose(self.skeleton.get_fps(), 1.0 / 0.033333)


class TestLoadFailures(object):

    def test_unbalanced_braces(self):
        skeleton = Skeleton()
        with pytest.raises(BVHSyntaxError):
            skeleton.loads(HIPS_ONLY.replace("}\nMOTION", "MOTION"))
        assert not skeleton.is_load_success()
        assert skeleton.get_num_joints() == 0

    def test_short_row(self):
        skeleton = Skeleton()
        with pytest.raises(BVHConsistencyError):
            skeleton.loads(HIPS_ONLY.replace("0 1 0 0 0 0", "0 1 0 0 0"))
        assert not skeleton.is_load_success()
        assert skeleton.get_motion().size == 0

    def test_frame_count_beyond_rows(self):
        skeleton = Skeleton()
        text = HIPS_ONLY[:HIPS_ONLY.index("MOTION")] + "MOTION\nFrames: 100000000000000\nFrame Time: 0.1\n0 0 0 0 0 0\n"
        with pytest.raises(BVHConsistencyError) as excinfo:
            skeleton.loads(text)
        assert excinfo.value.actual == 1
        assert not skeleton.is_load_success()

    def test_failed_load_replaces_model(self):
        skeleton = load_bvh_from_string(HIPS_ONLY)
        with pytest.raises(BVHIOError):
            skeleton.load(TEST_DATA_PATH + os.sep + 'does_not_exist.bvh')
        assert not skeleton.is_load_success()
        assert skeleton.get_num_channels() == 0
        assert skeleton.get_joint_by_name("Hips") is None


class TestInit(object):

    def test_init(self):
        joints, channels = create_chain_joints()
        skeleton = Skeleton()
        skeleton.init("chain", joints, channels, 2, 0.5, [1, 2, 3, 4, 5, 6, 7, 8])
        assert skeleton.is_load_success()
        assert skeleton.get_motion().shape == (2, 4)
        assert skeleton.get_rotation("root", 1) == (5.0, 6.0, 7.0)
        assert skeleton.get_position("child", 1) is None
        assert skeleton.get_joint(1).has_end_site

    def test_init_copies_joints(self):
        joints, channels = create_chain_joints()
        skeleton = Skeleton()
        skeleton.init("chain", joints, channels, 0, 0.5)
        joints[1].node_name = "renamed"
        assert skeleton.get_joint(1).node_name == "child"

    def test_duplicate_names(self):
        joints = [SkeletonJointNode("a", 0, None, children=(1, 2)),
                  SkeletonJointNode("b", 1, 0),
                  SkeletonJointNode("b", 2, 0)]
        skeleton = Skeleton()
        skeleton.init("dup", joints, [], 1, 0.1)
        assert skeleton.get_joint_by_name("b").index == 2

    param_invalid = create_invalid_cases()

    @params(param_invalid)
    def test_invalid(self, joints, channels, motion):
        skeleton = load_bvh_from_string(HIPS_ONLY)
        with pytest.raises(SkeletonConsistencyError):
            skeleton.init("invalid", joints, channels, 2, 0.1, motion)
        assert not skeleton.is_load_success()
        assert skeleton.get_num_joints() == 0

    def test_negative_frame_time(self):
        joints, channels = create_chain_joints()
        with pytest.raises(SkeletonConsistencyError):
            Skeleton().init("chain", joints, channels, 1, -0.1)

    def test_set_skeleton_and_motion(self):
        joints, channels = create_chain_joints()
        skeleton = Skeleton()
        skeleton.set_skeleton("chain", joints, channels)
        assert skeleton.get_motion().shape == (0, 4)
        skeleton.set_motion(3, 0.25)
        assert np.array_equal(skeleton.get_motion(), np.zeros((3, 4)))
        skeleton.set_motion(1, 0.25, [[1, 2, 3, 4]])
        assert skeleton.get_motion_at(0, 3) == 4.0
        with pytest.raises(SkeletonConsistencyError):
            skeleton.set_motion(2, 0.25, [[1, 2, 3, 4]])
        assert not skeleton.is_load_success()

    def test_set_motion_on_empty_skeleton(self):
        with pytest.raises(SkeletonConsistencyError):
            Skeleton().set_motion(1, 0.1)

    def test_clear(self):
        skeleton = load_bvh_from_string(HIPS_ONLY)
        skeleton.clear()
        assert not skeleton.is_load_success()
        assert skeleton.get_num_joints() == 0
        assert skeleton.get_num_channels() == 0
        assert skeleton.get_num_frames() == 0
        assert skeleton.get_joint_by_name("Hips") is None


class TestJsonExport(object):

    def test_json_round_trip(self, tmpdir):
        from bvh_skeleton.animation_data.skeleton_builder import SkeletonBuilder
        skeleton = load_bvh(TEST_DATA_PATH + os.sep + 'walk_short.bvh')
        filename = str(tmpdir.join("walk_short.json"))
        skeleton.save_to_json(filename)
        loaded = SkeletonBuilder().load_from_json_file(filename)
        assert loaded.get_joints() == skeleton.get_joints()
        assert loaded.get_channels() == skeleton.get_channels()
        assert np.array_equal(loaded.get_motion(), skeleton.get_motion())
        assert loaded.get_motion_name() == "walk_short"
