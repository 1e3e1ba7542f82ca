"""Resource centre, support tickets and platform messages."""
