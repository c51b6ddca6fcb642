from .constants import *
from .bvh_lexer import BVHLexer, TokenStream, Token
from .bvh import BVHReader, BVHWriter
from .skeleton import Skeleton
from .skeleton_builder import SkeletonBuilder
from .skeleton_node import SKELETON_NODE_TYPE_ROOT, SKELETON_NODE_TYPE_JOINT, SkeletonJointNode, SkeletonChannel
from .skeleton_info import describe_joint, describe_skeleton


def load_bvh(filename):
    return Skeleton().load(filename)


def load_bvh_from_string(bvh_string, name=""):
    return Skeleton().loads(bvh_string, name)
