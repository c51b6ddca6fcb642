#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

BVH
===

Biovision file format classes for reading and writing.

"""

import os
import numpy as np
from .bvh_lexer import BVHLexer, TokenStream
from .constants import KEYWORD_HIERARCHY, KEYWORD_ROOT, KEYWORD_JOINT, KEYWORD_OFFSET, KEYWORD_CHANNELS, \
    KEYWORD_END, KEYWORD_SITE, KEYWORD_MOTION, KEYWORD_FRAMES, KEYWORD_FRAME, KEYWORD_TIME, OFFSET_LEN, \
    channel_type_from_name, channel_name, merge_bvh_writer_config
from .skeleton_builder import SkeletonBuilder
from ..utilities.exceptions import BVHIOError, BVHSyntaxError, BVHConsistencyError, SkeletonConsistencyError
from ..utilities.log import write_message_to_log, LOG_MODE_DEBUG, LOG_MODE_ERROR


class BVHReader(object):

    """Biovision file format class

    Parameters
    ----------
     * infilename: string
    \t path to BVH file that is loaded initially

    """

    def __init__(self, infilename=""):
        self.joints = []
        self.channels = []
        self.root = ""
        self.frame_time = None
        self.n_frames = 0
        self.frames = None
        self.filepath = str(infilename)
        if self.filepath != "":
            try:
                with open(self.filepath, "r", encoding="utf-8") as infile:
                    text = infile.read()
            except (OSError, UnicodeDecodeError) as e:
                write_message_to_log("Error: could not read " + self.filepath, LOG_MODE_ERROR)
                raise BVHIOError(self.filepath, e)
            self.process_text(text)
        self.filename = os.path.split(self.filepath)[-1]

    @classmethod
    def init_from_string(cls, bvh_string):
        bvh_reader = cls(infilename="")
        bvh_reader.process_text(bvh_string)
        return bvh_reader

    def process_text(self, text):
        """ Parses the hierarchy and the motion of a BVH text
        """
        stream = TokenStream(BVHLexer(text))
        builder = self._read_hierarchy(stream)
        self.joints, self.channels = builder.build_hierarchy()
        self.root = self.joints[0].node_name
        self._read_motion(stream, len(self.channels))
        write_message_to_log("read %d joints, %d channels and %d frames" % (len(self.joints), len(self.channels),
                                                                           self.n_frames), LOG_MODE_DEBUG)

    def _read_hierarchy(self, stream):
        """Reads the skeleton part of a BVH file"""
        stream.expect(KEYWORD_HIERARCHY)
        token = stream.next_token(repr(KEYWORD_ROOT))
        if token.value != KEYWORD_ROOT:
            raise BVHSyntaxError("expected a ROOT joint but found %r" % token.value, token.line_number)
        builder = SkeletonBuilder()
        self._read_joint(stream, builder, None)
        return builder

    def _read_joint(self, stream, builder, parent):
        name = self._read_joint_name(stream)
        if parent is None:
            node_id = builder.add_root(name)
        else:
            node_id = builder.add_joint(name, parent)
        stream.expect("{")
        while True:
            token = stream.next_token("'}' to close joint " + name)
            if token.value == KEYWORD_OFFSET:
                builder.set_offset(node_id, self._read_vector(stream))
            elif token.value == KEYWORD_CHANNELS:
                builder.add_channels(node_id, self._read_channel_types(stream))
            elif token.value == KEYWORD_JOINT:
                self._read_joint(stream, builder, node_id)
            elif token.value == KEYWORD_END:
                if builder.has_end_site(node_id):
                    raise BVHSyntaxError("second End Site in joint " + name, token.line_number)
                builder.set_end_site(node_id, self._read_end_site(stream))
            elif token.value == "}":
                return node_id
            else:
                raise BVHSyntaxError("unexpected token %r in joint %s" % (token.value, name), token.line_number)

    def _read_joint_name(self, stream):
        """ The name is the rest of the line after ROOT or JOINT
        """
        keyword_line = stream.line_number
        parts = []
        token = stream.peek()
        while token is not None and token.line_number == keyword_line and token.value not in ("{", "}"):
            parts.append(stream.next_token().value)
            token = stream.peek()
        if not parts:
            raise BVHSyntaxError("missing joint name", keyword_line)
        return " ".join(parts)

    def _read_vector(self, stream):
        return [stream.read_float("an offset value") for _ in range(OFFSET_LEN)]

    def _read_channel_types(self, stream):
        n_channels = stream.read_int("the number of channels")
        if n_channels < 0:
            raise BVHSyntaxError("negative number of channels", stream.line_number)
        channel_types = []
        for _ in range(n_channels):
            token = stream.next_token("a channel type")
            channel_type = channel_type_from_name(token.value)
            if channel_type is None:
                raise BVHSyntaxError("unknown channel type %r" % token.value, token.line_number)
            channel_types.append(channel_type)
        return channel_types

    def _read_end_site(self, stream):
        stream.expect(KEYWORD_SITE)
        stream.expect("{")
        stream.expect(KEYWORD_OFFSET)
        offset = self._read_vector(stream)
        stream.expect("}")
        return offset

    def _read_motion(self, stream, n_channels):
        """Reads the frame time and the frames part of a BVH file.
        Every frame is one line with exactly n_channels values.
        """
        stream.expect(KEYWORD_MOTION)
        stream.expect(KEYWORD_FRAMES)
        n_frames = stream.read_int("the number of frames")
        if n_frames < 0:
            raise BVHSyntaxError("negative number of frames", stream.line_number)
        stream.expect(KEYWORD_FRAME)
        stream.expect(KEYWORD_TIME)
        frame_time = stream.read_float("the frame time")
        header_line = stream.line_number

        rows = []
        row = None
        row_line = header_line
        while not stream.at_end():
            token = stream.next_token()
            if token.line_number != row_line:
                if row is not None:
                    self._check_row_length(len(row), n_channels, row_line)
                row = []
                rows.append(row)
                row_line = token.line_number
            elif row is None:
                raise BVHSyntaxError("unexpected token %r after the frame time" % token.value, token.line_number)
            row.append(self._to_float(token))
        if row is not None:
            self._check_row_length(len(row), n_channels, row_line)
        if n_channels > 0 and len(rows) != n_frames:
            raise BVHConsistencyError("number of frame rows does not match the frame count", n_frames, len(rows))

        self.n_frames = n_frames
        self.frame_time = frame_time
        if n_channels > 0:
            self.frames = np.array(rows, dtype=float).reshape((n_frames, n_channels))
        else:
            self.frames = np.zeros((n_frames, 0))

    def _check_row_length(self, n_values, n_channels, line_number):
        if n_values != n_channels:
            raise BVHConsistencyError("number of values in the frame does not match the channel count",
                                      n_channels, n_values, line_number)

    def _to_float(self, token):
        try:
            return float(token.value)
        except ValueError:
            raise BVHSyntaxError("expected a motion value but found %r" % token.value, token.line_number)


class BVHWriter(object):

    """ Saves a skeleton and its motion as a BVH file.

    Parameters
    ----------
    * filename: String or None
        Name of the created bvh file. Can be None.
    * skeleton: Skeleton
        Skeleton structure and motion that are written
    * config: dict or None
        Settings overriding DEFAULT_BVH_WRITER_CONFIG
    """

    def __init__(self, filename, skeleton, config=None):
        self.skeleton = skeleton
        self.config = merge_bvh_writer_config(config)
        if filename is not None:
            self.write(filename)

    def write(self, filename):
        """ Write the hierarchy string and the frame parameter string to file
        """
        bvh_string = self.generate_bvh_string()
        filename = str(filename)
        if self.config["append_extension"] and not filename.endswith('.bvh'):
            filename = filename + '.bvh'
        try:
            with open(filename, 'w', encoding="utf-8") as outfile:
                outfile.write(bvh_string)
        except OSError as e:
            write_message_to_log("Error: could not write " + filename, LOG_MODE_ERROR)
            raise BVHIOError(filename, e)
        return filename

    def generate_bvh_string(self):
        if not self.skeleton.is_load_success():
            raise SkeletonConsistencyError("Cannot write a skeleton that was not loaded successfully")
        bvh_string = self._generate_hierarchy_string(self.skeleton)
        bvh_string += self._generate_bvh_frame_string(self.skeleton)
        return bvh_string

    def _format_float(self, value, float_format):
        if float_format is None:
            return repr(float(value))
        return float_format % value

    def _generate_hierarchy_string(self, skeleton):
        """ Initiates the recursive generation of the skeleton structure string
            by calling _generate_joint_string with the root joint
        """
        hierarchy_string = KEYWORD_HIERARCHY + "\n"
        hierarchy_string += self._generate_joint_string(skeleton.get_root(), skeleton, 0)
        return hierarchy_string

    def _generate_joint_string(self, joint, skeleton, joint_level):
        """ Recursive traversing of the joint hierarchy to create a
            skeleton structure string in the BVH format
        """
        tab_string = self.config["indent"] * joint_level
        inner_tab_string = tab_string + self.config["indent"]

        if joint.parent is None:
            joint_string = tab_string + KEYWORD_ROOT + " " + joint.node_name + "\n"
        else:
            joint_string = tab_string + KEYWORD_JOINT + " " + joint.node_name + "\n"
        joint_string += tab_string + "{\n"
        joint_string += inner_tab_string + self._generate_offset_string(joint.offset)

        channel_names = [channel_name(skeleton.get_channel(c).type) for c in joint.channels]
        joint_string += inner_tab_string + KEYWORD_CHANNELS + " " + " ".join([str(len(channel_names))] + channel_names) + "\n"

        for child in joint.children:
            joint_string += self._generate_joint_string(skeleton.get_joint(child), skeleton, joint_level + 1)

        if joint.has_end_site:
            joint_string += inner_tab_string + KEYWORD_END + " " + KEYWORD_SITE + "\n"
            joint_string += inner_tab_string + "{\n"
            joint_string += inner_tab_string + self.config["indent"] + self._generate_offset_string(joint.end_site)
            joint_string += inner_tab_string + "}\n"

        joint_string += tab_string + "}\n"
        return joint_string

    def _generate_offset_string(self, offset):
        float_format = self.config["float_format"]
        return KEYWORD_OFFSET + " " + " ".join(self._format_float(v, float_format) for v in offset) + "\n"

    def _generate_bvh_frame_string(self, skeleton):
        """
            Converts the motion of the skeleton into the BVH file representation.
        """
        float_format = self.config["float_format"]
        frame_parameter_string = KEYWORD_MOTION + "\n"
        frame_parameter_string += KEYWORD_FRAMES + " " + str(skeleton.get_num_frames()) + "\n"
        frame_parameter_string += KEYWORD_FRAME + " " + KEYWORD_TIME + " " + \
            self._format_float(skeleton.get_frame_time(), self.config["frame_time_format"]) + "\n"
        lines = []
        for frame in skeleton.get_motion():
            lines.append(" ".join(self._format_float(v, float_format) for v in frame) + "\n")
        frame_parameter_string += "".join(lines)
        return frame_parameter_string
