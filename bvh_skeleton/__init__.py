from .animation_data import Skeleton, SkeletonBuilder, BVHReader, BVHWriter, load_bvh, load_bvh_from_string
from .utilities import BVHError, BVHIOError, BVHSyntaxError, BVHConsistencyError, SkeletonConsistencyError
