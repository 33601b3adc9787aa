"""Infrastructure: hosted backend adapters, repositories, local session cache, seeding."""
