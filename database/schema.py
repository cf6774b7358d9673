"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'booking_status_logs',
        'bookings',
        'cameras',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Resource catalog
    db.execute('''
        CREATE TABLE cameras (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            category TEXT,
            daily_rate REAL NOT NULL DEFAULT 0,
            total_units INTEGER NOT NULL DEFAULT 1 CHECK(total_units >= 0),
            cached_available INTEGER NOT NULL DEFAULT 0,
            status TEXT NOT NULL DEFAULT 'active'
                CHECK(status IN ('active', 'maintenance', 'retired')),
            description TEXT,
            specifications TEXT,
            revision INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK(cached_available >= 0 AND cached_available <= total_units)
        )
    ''')

    # 2. Reservations
    db.execute('''
        CREATE TABLE bookings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            camera_id INTEGER NOT NULL REFERENCES cameras(id),
            camera_name TEXT NOT NULL,
            customer_name TEXT NOT NULL,
            customer_email TEXT NOT NULL,
            customer_phone TEXT NOT NULL,
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            start_time TEXT,
            end_time TEXT,
            total_days INTEGER NOT NULL,
            daily_rate REAL NOT NULL,
            total_amount REAL NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK(status IN ('pending', 'confirmed', 'active',
                                 'completed', 'overtime', 'cancelled')),
            notes TEXT,
            admin_notes TEXT,
            revision INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT,
            CHECK(start_date <= end_date)
        )
    ''')

    # 3. Append-only status change log
    db.execute('''
        CREATE TABLE booking_status_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            booking_id INTEGER NOT NULL REFERENCES bookings(id) ON DELETE CASCADE,
            old_status TEXT,
            new_status TEXT NOT NULL,
            actor TEXT NOT NULL,
            changed_at TEXT NOT NULL,
            notes TEXT
        )
    ''')


def create_indexes(db):
    """Create performance indexes."""

    # Booking indexes
    db.execute('CREATE INDEX idx_bookings_camera ON bookings(camera_id, status)')
    db.execute('CREATE INDEX idx_bookings_dates ON bookings(start_date, end_date)')

    # Status log indexes
    db.execute('CREATE INDEX idx_status_logs_booking ON booking_status_logs(booking_id, id)')
