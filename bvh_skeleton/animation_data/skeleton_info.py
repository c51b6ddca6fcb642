""" Text summaries of a loaded skeleton """
from .constants import short_stringify


def _format_vector(values):
    return ",".join(repr(float(v)) for v in values)


def describe_joint(skeleton, joint):
    """ One tab separated line: index, name, offset, end site and channels,
        e.g. 0	Hips	offset(0.0,0.0,0.0)		XP(0)YP(1)ZP(2)
    """
    channel_string = "".join("%s(%d)" % (short_stringify(c.type), c.index)
                             for c in skeleton.get_joint_channels(joint))
    fields = [str(joint.index), joint.node_name, "offset(%s)" % _format_vector(joint.offset)]
    if joint.has_end_site:
        fields.append("site(%s)" % _format_vector(joint.end_site))
    else:
        fields.append("")
    fields.append(channel_string)
    return "\t".join(fields)


def describe_skeleton(skeleton):
    lines = ["Interval=%ss" % skeleton.get_frame_time()]
    fps = skeleton.get_fps()
    if fps is not None:
        lines.append("FPS=%s" % fps)
    lines.append("NumFrame=%d" % skeleton.get_num_frames())
    lines.append("AnimationTime=%ss" % skeleton.get_animation_time())
    lines.append("NumFrame=%d NumChannel=%d Stride=%d" % (skeleton.get_num_frames(), skeleton.get_num_channels(),
                                                         skeleton.get_stride()))
    lines.append("Joints:")
    for joint in skeleton.get_joints():
        lines.append(describe_joint(skeleton, joint))
    return "\n".join(lines)
