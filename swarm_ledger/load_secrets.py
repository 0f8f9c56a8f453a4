import os
from dotenv import load_dotenv

load_dotenv()

db_backend = os.getenv("DB_BACKEND", "sqlite")
sqlite_path = os.getenv("SQLITE_PATH", "swarm_ledger.sqlite3")

user = os.getenv("DB_USER")
password = os.getenv("DB_PASSWORD")
host = os.getenv("DB_HOST")
port = os.getenv("DB_PORT")
db_name = os.getenv("DB_NAME")
pool_size = int(os.getenv("DB_POOL_SIZE", "20"))
max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "20"))

signature_header = os.getenv("SIGNATURE_HEADER", "ed25519-signature")
log_level = os.getenv("LOG_LEVEL", "INFO")
server_host = os.getenv("SERVER_HOST", "127.0.0.1")
server_port = int(os.getenv("SERVER_PORT", "9000"))

if __name__ == "__main__":
    print(db_backend, sqlite_path, user, host, port, db_name, signature_header, log_level)
