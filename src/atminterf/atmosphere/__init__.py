"""Atmospheric models feeding the interferometric delay engine.

Each model yields the layer refractivity and the elevation bending (with its
rate of change) between the antenna and the reflecting surface.
"""
