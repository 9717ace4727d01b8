from .regions import RegionMapping, equilnum, global_cell_lookup
