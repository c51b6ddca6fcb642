# -*- coding: utf-8 -*-
"""
File helpers shared by the skeleton export and the writer configuration.
"""

import json
import collections


def load_json_file(filename, use_ordered_dict=False):
    """ Load a dictionary from a file

    Parameters
    ----------
    * filename: string
    \tThe path to the saved json file.
    * use_ordered_dict: bool
    \tIf set to True dicts are read as OrderedDicts.
    """
    with open(filename, 'r', encoding="utf-8") as infile:
        if use_ordered_dict:
            return json.JSONDecoder(
                object_pairs_hook=collections.OrderedDict).decode(
                infile.read())
        return json.load(infile)


def write_to_json_file(filename, serializable, indent=4):
    with open(filename, 'w', encoding="utf-8") as outfile:
        outfile.write(json.dumps(serializable, indent=indent))
