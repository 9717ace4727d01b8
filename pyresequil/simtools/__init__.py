from .simtools import LET, corey, pc_power, sat_table
