"""
Database seed data.
Initial camera catalog for fresh database installations.
"""


def seed_database(db):
    """Insert initial seed data."""

    # Cached availability starts at full capacity: no bookings exist yet
    cameras_data = [
        ('Canon EOS R6 Mark II', 'mirrorless', 350000, 3,
         'Full-frame mirrorless body', '24.2MP, IBIS, 4K60'),
        ('Sony A7 IV', 'mirrorless', 400000, 2,
         'Full-frame hybrid body', '33MP, 4K60 10-bit'),
        ('Fujifilm X100VI', 'compact', 300000, 2,
         'Fixed-lens compact', '40MP APS-C, 23mm f/2'),
        ('Nikon Z6 II', 'mirrorless', 320000, 1,
         'Full-frame mirrorless body', '24.5MP, dual EXPEED 6'),
    ]

    for name, category, daily_rate, total_units, description, specifications in cameras_data:
        db.execute('''
            INSERT INTO cameras (name, category, daily_rate, total_units, cached_available,
                                 status, description, specifications)
            VALUES (?, ?, ?, ?, ?, 'active', ?, ?)
        ''', (name, category, daily_rate, total_units, total_units, description, specifications))
