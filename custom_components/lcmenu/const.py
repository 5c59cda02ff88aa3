DOMAIN = "lcmenu"

CONF_NAME = "name"
CONF_DISTRICT_ID = "district_id"
CONF_BUILDING_ID = "building_id"
CONF_LUNCH_ONLY = "lunch_only"
CONF_MAIN_ENTREES_ONLY = "main_entrees_only"
CONF_LUNCH_BEGIN = "lunch_begin"
CONF_LUNCH_END = "lunch_end"

BASE_URL = "https://api.linqconnect.com/api/FamilyMenu"

# upstream formats
WIRE_DATE_FORMAT = "%m-%d-%Y"
MENU_DATE_FORMAT = "%m/%d/%Y"

LOG_LEVEL_ENV = "LC_LUNCH_MENU_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "info"
