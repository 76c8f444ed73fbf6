import os


# FIT global message numbers of the golf scorecard messages
GOLF_COURSE_MESG_NUM = 190
GOLF_SCORE_MESG_NUM = 192
GOLF_HOLE_MESG_NUM = 193
GOLF_SHOT_MESG_NUM = 194

# Club type id of the putter in the club-types registry
PUTTER_CLUB_TYPE_ID = 23
UNKNOWN_CLUB_ID = 0
UNKNOWN_CLUB_LABEL = "unknown"
NOT_RECORDED_CLUB_LABEL = "Unknown"

YARDS_TO_METERS = 0.9144
METERS_TO_YARDS = 1.09361

DEFAULT_LOW_PERCENTILE = 5.0
DEFAULT_HIGH_PERCENTILE = 98.0
DEFAULT_BIN_SIZE = 0.5
DEFAULT_IMPLAUSIBLE_PUTTS_RATIO = 0.8
DEFAULT_WEDGE_FULL_SWING_PERCENTILE = 90.0
DEFAULT_GIR_MIN_HOLES = 9
FULL_ROUND_HOLES = (9, 18)

# Export file names as produced by the Garmin data export
SCORECARD_EXPORT = "Golf-SCORECARD.json"
SHOT_EXPORT = "Golf-SHOT.json"
CLUB_EXPORT = "Golf-CLUB.json"
CLUB_TYPES_EXPORT = "Golf-CLUB_TYPES.json"
SCORECARD_FIT_PATTERN = "SCORECARD_RAWDATA"

DEFAULT_DATA_DIR = os.getenv('PARFLOW_DATA_DIR', os.path.join('data', 'DI-GOLF'))
DEFAULT_FITCSVTOOL_JAR = os.path.join('tools', 'FitCSVTool.jar')
