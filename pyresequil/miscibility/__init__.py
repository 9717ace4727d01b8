from .miscibility import RsFunction, NoMixing, RsVD, RvVD, RsSatAtContact, RvSatAtContact, select_rs_functions, select_rv_functions
