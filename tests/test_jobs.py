"""Job offer listing, publication and ownership rules."""

from tests.conftest import login_company, send


class TestJobSearch:
    """Public, paginated job search."""

    def test_lists_jobs_with_company(self, client, seed_company, seed_job):
        company = seed_company()
        seed_job(company["id_company"])

        body = client.get("/jobs").json()

        assert body["total"] == 1
        assert body["items"][0]["company"]["name"] == "Acme"
        assert body["page"] == 1

    def test_most_recent_first(self, client, seed_company, seed_job):
        company = seed_company()
        seed_job(company["id_company"], title="Older", published_at="2026-01-01T00:00:00+00:00")
        seed_job(company["id_company"], title="Newer", published_at="2026-03-01T00:00:00+00:00")

        titles = [job["title"] for job in client.get("/jobs").json()["items"]]

        assert titles == ["Newer", "Older"]

    def test_text_search_and_filters(self, client, seed_company, seed_job):
        company = seed_company()
        seed_job(company["id_company"], title="Data Engineer", location="Lyon", contract_type="CDD")
        seed_job(company["id_company"], title="Python Developer")

        assert client.get("/jobs", params={"q": "engineer"}).json()["total"] == 1
        assert client.get("/jobs", params={"location": "lyon"}).json()["total"] == 1
        assert client.get("/jobs", params={"contract_type": "cdi"}).json()["total"] == 1

    def test_search_metacharacters_are_neutralised(self, client, seed_company, seed_job):
        """A crafted search term must not widen the filter."""
        seed_job(seed_company()["id_company"])
        response = client.get("/jobs", params={"q": "zzz,id_job_offer.gt.0"})
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_pagination(self, client, seed_company, seed_job):
        company = seed_company()
        for index in range(3):
            seed_job(company["id_company"], title=f"Job {index}")

        body = client.get("/jobs", params={"page": 2, "limit": 2}).json()

        assert len(body["items"]) == 1
        assert body["total_pages"] == 2
        assert body["has_prev"] is True

    def test_unknown_job(self, client):
        assert client.get("/jobs/999").status_code == 404


class TestJobPublication:
    """Companies publish and manage their own offers."""

    def test_company_creates_job(self, company_client, fake_db):
        test_client, company = company_client
        response = send(test_client, "POST", "/jobs", json={
            "title": "  Backend Engineer ",
            "description": "FastAPI services",
            "salary_min": 40000,
            "salary_max": 50000,
        })

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Backend Engineer"
        assert body["id_company"] == company["id_company"]
        assert fake_db.rows("job_offer")[0]["published_at"]

    def test_inverted_salary_range_rejected(self, company_client):
        test_client, _ = company_client
        response = send(test_client, "POST", "/jobs", json={
            "title": "Backend Engineer",
            "description": "FastAPI services",
            "salary_min": 60000,
            "salary_max": 50000,
        })
        assert response.status_code == 422

    def test_candidate_cannot_publish(self, user_client):
        test_client, _ = user_client
        response = send(test_client, "POST", "/jobs", json={"title": "X", "description": "Y"})
        assert response.status_code == 403

    def test_anonymous_cannot_publish(self, client):
        response = send(client, "POST", "/jobs", json={"title": "X", "description": "Y"})
        assert response.status_code == 401

    def test_owner_updates_job(self, company_client, seed_job):
        test_client, company = company_client
        job = seed_job(company["id_company"])

        response = send(test_client, "PUT", f"/jobs/{job['id_job_offer']}", json={"location": "Nantes"})

        assert response.status_code == 200
        assert response.json()["location"] == "Nantes"

    def test_update_checks_salary_against_stored_values(self, company_client, seed_job):
        test_client, company = company_client
        job = seed_job(company["id_company"], salary_min=50000, salary_max=60000)

        response = send(test_client, "PUT", f"/jobs/{job['id_job_offer']}", json={"salary_max": 40000})

        assert response.status_code == 400

    def test_other_company_cannot_modify(self, make_client, seed_company, seed_job):
        owner = seed_company()
        intruder = seed_company(recruiter_mail="hr@initech.io", name="Initech")
        job = seed_job(owner["id_company"])
        test_client = make_client()
        login_company(test_client, intruder["recruiter_mail"])

        assert send(test_client, "PUT", f"/jobs/{job['id_job_offer']}", json={"title": "Mine"}).status_code == 403
        assert send(test_client, "DELETE", f"/jobs/{job['id_job_offer']}").status_code == 403

    def test_owner_deletes_job(self, company_client, seed_job, fake_db):
        test_client, company = company_client
        job = seed_job(company["id_company"])

        response = send(test_client, "DELETE", f"/jobs/{job['id_job_offer']}")

        assert response.status_code == 200
        assert fake_db.rows("job_offer") == []

    def test_admin_can_delete_any_job(self, admin_client, seed_company, seed_job, fake_db):
        test_client, _ = admin_client
        job = seed_job(seed_company()["id_company"])

        assert send(test_client, "DELETE", f"/jobs/{job['id_job_offer']}").status_code == 200
        assert fake_db.rows("job_offer") == []
