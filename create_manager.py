import sys
import psycopg2
from fieldtasks.core.security import hash_password
from fieldtasks.core.config import get_settings
from fieldtasks.core.enums import UserRole


def create_manager_user(email: str, password: str, name: str) -> bool:
    settings = get_settings()
    try:
        conn = psycopg2.connect(
            host=settings.DB_HOST,
            port=settings.DB_PORT,
            user=settings.DB_USER,
            password=settings.DB_PASSWORD,
            database=settings.DB_NAME
        )
    except psycopg2.Error as e:
        print(f"Error connecting to database: {e}")
        return False

    try:
        with conn, conn.cursor() as cursor:
            cursor.execute("SELECT id FROM users WHERE email = %s", (email,))
            if cursor.fetchone():
                print(f"Error: User '{email}' already exists")
                return False

            cursor.execute(
                "INSERT INTO users (email, password, name, role) VALUES (%s, %s, %s, %s) RETURNING id",
                (email, hash_password(password, settings.BCRYPT_ROUNDS), name, UserRole.MANAGER.value)
            )
            user_id = cursor.fetchone()[0]

        print(f"Manager '{email}' created successfully")
        print(f"User ID: {user_id}")
        return True

    except psycopg2.Error as e:
        print(f"Error creating manager: {e}")
        return False
    finally:
        conn.close()


def main():
    if len(sys.argv) < 4:
        print("Usage: python create_manager.py <email> <password> <name>")
        sys.exit(1)

    email, password, name = sys.argv[1], sys.argv[2], sys.argv[3]

    if not email or not password or not name:
        print("Error: email, password and name cannot be empty")
        sys.exit(1)

    success = create_manager_user(email, password, name)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
