# -*- coding: utf-8 -*-
"""
Prints frame timing and the joint table of a BVH file.

usage: python run_print_bvh.py walk.bvh
"""
import sys
import logging
from bvh_skeleton import load_bvh, BVHError
from bvh_skeleton.animation_data import describe_skeleton


def main(filename):
    try:
        skeleton = load_bvh(filename)
    except BVHError as e:
        print("Failed to load BVH file %s: %s" % (filename, e))
        return 1
    print("loaded BVH file %s" % filename)
    print(describe_skeleton(skeleton))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) < 2:
        print("Usage: python run_print_bvh.py file.bvh")
        sys.exit(0)
    sys.exit(main(sys.argv[1]))
