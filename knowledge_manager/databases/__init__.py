# -*- coding: utf-8 -*-
"""The databases module."""
