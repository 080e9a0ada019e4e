# -*- coding: utf-8 -*-
"""The post module."""
