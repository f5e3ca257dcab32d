# Database migration scripts directory
#
# These scripts apply the SQL files packaged in xerus_bridge/migrations/sql
# and print verification reports. They are safe to run multiple times as long
# as the SQL itself is idempotent.
#
# Migration scripts:
# - run_migration.py - Applies one SQL file (default: agent user isolation)
# - migrate_all.py - Applies every packaged SQL file in filename order
# - create_credentials_table.py - Creates the user_credentials table
# - add_tool_icon_column.py - Adds tool_configurations.icon and fills icon URLs
#
# Usage:
#   python3 backend/scripts/migrations/<script_name>.py
