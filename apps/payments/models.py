from django.db import models


# The payments app persists nothing; shop configuration and orders are owned
# by the caller. These choices are the closed tag sets of a payment policy.


class SplitModel(models.TextChoices):
    TWO_WAY = '2-way', 'Platform + vendor'
    COG_BASED = 'cog-based', 'Cost of goods first, then platform + vendor'
    THREE_WAY = '3-way', 'Platform + hotel + vendor'


class Destination(models.TextChoices):
    PLATFORM = 'platform', 'Platform'
    VENDOR = 'vendor', 'Vendor'
    HOTEL = 'hotel', 'Hotel'
    SPLIT = 'split', 'Split by share map'


class Party(models.TextChoices):
    PLATFORM = 'platform', 'Platform'
    HOTEL = 'hotel', 'Hotel'
    VENDOR = 'vendor', 'Vendor'
