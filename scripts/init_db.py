#!/usr/bin/env python3
"""
Create the petition tables and their indexes without running migrations.
Intended for local development; production uses `flask db upgrade`.
"""

import sys
sys.path.insert(0, ".")

from julisha import create_app, db, verify_schema
from julisha.config import Config
from julisha.errors import SchemaMissingError


class InitConfig(Config):
    AUTO_CREATE_SCHEMA = True


def init_db():
    app = create_app(InitConfig)

    with app.app_context():
        try:
            verify_schema()
        except SchemaMissingError as e:
            print(f"Error: {e}")
            return 1

        for table in db.metadata.sorted_tables:
            print(f"  {table.name}: {', '.join(sorted(i.name for i in table.indexes)) or 'no indexes'}")

        if db.engine.dialect.name == "postgresql":
            db.session.execute(db.text("ANALYZE signatures"))
            db.session.commit()
            print("  Analyzed signatures table")

    print("Done! Schema created successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(init_db())
