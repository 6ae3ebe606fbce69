from . import clock, config_manager, data_manager, results
