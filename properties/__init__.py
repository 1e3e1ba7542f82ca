"""
Properties app for the DealFlow platform.

This app manages property listings, their slideshow images and the
admin verification workflow that makes a listing visible to partners.
"""
