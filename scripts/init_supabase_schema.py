#!/usr/bin/env python3
"""
Initialize Supabase database schema with direct PostgreSQL connection
"""
import os
import psycopg2
from dotenv import load_dotenv

load_dotenv()

TABLES = ["jobs", "vehicles", "tickets", "payment_transactions"]


def get_connection():
    """Get PostgreSQL connection using .env variables"""
    host = os.getenv("SUPABASE_DB_HOST")
    port = int(os.getenv("SUPABASE_DB_PORT", "6543"))
    database = os.getenv("SUPABASE_DB_NAME", "postgres")
    user = os.getenv("SUPABASE_DB_USER")
    password = os.getenv("SUPABASE_DB_PASSWORD")

    print(f"🔗 Connecting to: {host}:{port}")
    print(f"   Database: {database}")
    print(f"   User: {user}")

    return psycopg2.connect(
        host=host,
        port=port,
        database=database,
        user=user,
        password=password
    )


def create_schema():
    """Create database schema"""

    ddl_sql = """
    -- Jobs (venue/event with payment configuration)
    CREATE TABLE IF NOT EXISTS jobs (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        title TEXT NOT NULL,
        location TEXT,
        payment_config JSONB,
        created_at TIMESTAMPTZ DEFAULT NOW()
    );

    -- Vehicles
    CREATE TABLE IF NOT EXISTS vehicles (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        make TEXT,
        model TEXT,
        color TEXT,
        license_plate TEXT,
        created_at TIMESTAMPTZ DEFAULT NOW()
    );

    -- Tickets
    CREATE TABLE IF NOT EXISTS tickets (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        ticket_code TEXT NOT NULL UNIQUE,
        status TEXT NOT NULL DEFAULT 'CREATED' CHECK (status IN (
            'CREATED', 'QUEUED', 'CLAIMED', 'PARKING_IN_PROGRESS',
            'PARKED', 'OVERNIGHT_PARKED', 'REQUESTED', 'RETRIEVAL_IN_PROGRESS',
            'READY', 'COMPLETED', 'CLOSED', 'DELIVERED'
        )),
        created_at TIMESTAMPTZ DEFAULT NOW(),
        parked_at TIMESTAMPTZ,
        requested_at TIMESTAMPTZ,
        completed_at TIMESTAMPTZ,
        parking_zone TEXT,
        parking_level TEXT,
        parking_spot TEXT,
        payment_status TEXT NOT NULL DEFAULT 'unpaid' CHECK (payment_status IN ('unpaid', 'paid')),
        payment_intent_id TEXT,
        vehicle_id UUID REFERENCES vehicles(id),
        job_id UUID NOT NULL REFERENCES jobs(id)
    );

    -- Payment transactions (append-only, one per provider payment intent)
    CREATE TABLE IF NOT EXISTS payment_transactions (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        ticket_id UUID NOT NULL REFERENCES tickets(id),
        job_id UUID REFERENCES jobs(id),
        amount INTEGER NOT NULL CHECK (amount >= 0),
        base_amount INTEGER NOT NULL DEFAULT 0 CHECK (base_amount >= 0),
        tip_amount INTEGER NOT NULL DEFAULT 0 CHECK (tip_amount >= 0),
        currency TEXT NOT NULL DEFAULT 'usd',
        stripe_payment_intent_id TEXT NOT NULL UNIQUE,
        status TEXT NOT NULL CHECK (status IN ('succeeded')),
        created_at TIMESTAMPTZ DEFAULT NOW(),
        CONSTRAINT payment_transactions_components_sum CHECK (amount = base_amount + tip_amount)
    );

    -- Indexes for performance
    CREATE INDEX IF NOT EXISTS idx_tickets_job_id ON tickets(job_id);
    CREATE INDEX IF NOT EXISTS idx_tickets_status ON tickets(status);
    CREATE INDEX IF NOT EXISTS idx_payment_transactions_ticket_id ON payment_transactions(ticket_id);
    CREATE INDEX IF NOT EXISTS idx_payment_transactions_created_at ON payment_transactions(created_at DESC);
    """

    # Live status page subscribes to ticket row updates
    realtime_sql = """
    DO $$
    BEGIN
        IF NOT EXISTS (
            SELECT 1 FROM pg_publication_tables
            WHERE pubname = 'supabase_realtime' AND tablename = 'tickets'
        ) THEN
            ALTER PUBLICATION supabase_realtime ADD TABLE tickets;
        END IF;
    END $$;
    """

    sample_sql = """
    INSERT INTO jobs (id, title, location, payment_config)
    VALUES
        ('00000000-0000-0000-0000-000000000001', 'Harbor Gala', '1 Pier Ave',
         '{"model": "GUEST_PAYS", "baseRate": 500, "allowTips": true, "timing": "AT_DROPOFF"}'),
        ('00000000-0000-0000-0000-000000000002', 'Rooftop Wedding', '88 Skyline Blvd', NULL)
    ON CONFLICT DO NOTHING;

    INSERT INTO tickets (ticket_code, status, job_id, parking_zone, parking_spot)
    VALUES
        ('DEMO01', 'PARKED', '00000000-0000-0000-0000-000000000001', 'B', '14'),
        ('DEMO02', 'QUEUED', '00000000-0000-0000-0000-000000000002', NULL, NULL)
    ON CONFLICT DO NOTHING;
    """

    conn = None
    try:
        conn = get_connection()
        cur = conn.cursor()

        print("🔧 Creating database schema...")
        cur.execute(ddl_sql)
        conn.commit()
        print("✅ DDL executed successfully")

        print("📡 Enabling realtime for tickets...")
        cur.execute(realtime_sql)
        conn.commit()
        print("✅ Realtime publication updated")

        print("📝 Inserting sample data...")
        cur.execute(sample_sql)
        conn.commit()
        print("✅ Sample data inserted")

        cur.execute("""
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = 'public'
            AND table_name = ANY(%s)
            ORDER BY table_name
        """, (TABLES,))
        tables = cur.fetchall()

        print("\n📊 Created tables:")
        for table in tables:
            print(f"  - {table[0]}")

        for table_name in TABLES:
            cur.execute(f"SELECT COUNT(*) FROM {table_name}")
            count = cur.fetchone()[0]
            print(f"  {table_name}: {count} records")

        cur.close()
        return True

    except Exception as e:
        print(f"❌ Error: {str(e)}")
        if conn:
            conn.rollback()
        return False
    finally:
        if conn:
            conn.close()


if __name__ == "__main__":
    import sys
    success = create_schema()
    sys.exit(0 if success else 1)
