#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Merge CSV rows into a label template and tile the labels onto PDF pages.
"""

import label_merge.cli


if __name__ == "__main__":
	label_merge.cli.main()
