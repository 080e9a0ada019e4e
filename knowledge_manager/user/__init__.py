# -*- coding: utf-8 -*-
"""The user module."""
