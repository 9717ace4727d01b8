from .records import EquilRecord, DepthTable, EQUIL_ITEMS, deck_has, get_equil, get_rsvd, get_rvvd, get_swatinit
