"""Shared Supabase client for the quote, invoice and service tables."""

import logging
from functools import lru_cache
from typing import Optional

from supabase import Client, create_client

from ..config import settings


@lru_cache(maxsize=1)
def get_supabase_client() -> Optional[Client]:
    """Return the shared client, or None when records are kept as local JSON files.

    Creating the client does not contact the server; network errors surface on
    the first query.
    """
    url, key = settings.supabase_url, settings.supabase_key
    if not (url and key):
        logging.info("Supabase is not configured, quotes and invoices use local JSON records")
        return None

    try:
        return create_client(url, key)
    except Exception as e:
        logging.error(f"Could not create Supabase client for {url}: {e}")
        return None


# Tables read and written by the repositories:
#
# quotes    (quote_id text primary key, customer_name text, customer_email text,
#            customer_phone text, customer_address text, vehicle_info text, vehicle_vin text,
#            services jsonb, distance numeric, subtotal numeric, travel_cost numeric,
#            taxes numeric, total numeric, preferred_date date, time_slot text,
#            appointment_start timestamptz, notes text, status text,
#            created_at timestamptz, updated_at timestamptz)
# invoices  (invoice_id text primary key, invoice_number text, customer_email text,
#            customer_name text, customer_phone text, service_address text, service_name text,
#            services jsonb, distance numeric, subtotal numeric, taxes numeric,
#            total_amount numeric, status text, payment_method text, service_date text,
#            notes text, created_at timestamptz, updated_at timestamptz)
# services  (service_id text primary key, name text, category text, description text,
#            base_price numeric, duration integer, is_active boolean, options jsonb)
