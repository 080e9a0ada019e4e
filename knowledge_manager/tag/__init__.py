# -*- coding: utf-8 -*-
"""The tag module."""
