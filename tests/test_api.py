"""API endpoint tests."""


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register_user(client):
    """Test user registration."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "newuser@example.com", "password": "password123", "name": "New User"},
    )
    assert response.status_code == 201
    assert "access_token" in response.json()


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email fails."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": auth_headers.email, "password": "password123", "name": "Duplicate"},
    )
    assert response.status_code == 400
    assert "already registered" in response.json()["detail"]


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    assert "access_token" in response.json()


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == auth_headers.email
    assert response.json()["age"] is None


def test_invalid_token(client):
    """Test that a garbage bearer token is rejected."""
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_update_profile(client, auth_headers):
    """Test setting the profile used to personalize recipes."""
    response = client.put(
        "/api/v1/auth/me/profile",
        headers=auth_headers,
        json={"age": 34, "height": 172, "weight": 68, "health_conditions": " lactose intolerant "},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["age"] == 34
    assert data["height"] == 172
    assert data["health_conditions"] == "lactose intolerant"
    assert data["name"] == "Test User"


def test_update_profile_blank_clears(client, auth_headers):
    """Test that blank values clear profile fields and absent ones are kept."""
    client.put("/api/v1/auth/me/profile", headers=auth_headers, json={"age": 34, "weight": 68})

    response = client.put("/api/v1/auth/me/profile", headers=auth_headers, json={"age": ""})
    assert response.status_code == 200
    assert response.json()["age"] is None
    assert response.json()["weight"] == 68


def test_update_profile_rejects_out_of_range(client, auth_headers):
    """Test that impossible values are rejected."""
    response = client.put("/api/v1/auth/me/profile", headers=auth_headers, json={"age": 400})
    assert response.status_code == 422
