"""Built-in sample internships.

Used as the development catalog when no dataset is configured and as the
static source of the last-resort fallback recommendations.
"""

SAMPLE_ROWS: list[dict[str, object]] = [
    {
        "id": "AICTE_1",
        "title": "IT & E-GOVERNANCE",
        "job_type": "Full Time",
        "company": "State Mission Management Unit, AMRUT Kerala",
        "posted_date": "06-10-2023",
        "city": "Thiruvananthapuram",
        "state": "Kerala",
        "stipend": "10000 /month",
        "start_date": "Immediately",
        "duration": "6 Months",
        "total_openings": 1,
        "apply_by": "12-11-2023",
    },
    {
        "id": "AICTE_2",
        "title": "CIVIL ENGINEER (INTERN)",
        "job_type": "Full Time",
        "company": "Thrissur Municipal Corporation",
        "posted_date": "18-06-2024",
        "city": "Thrissur",
        "state": "Kerala",
        "stipend": "10000 /month",
        "start_date": "Immediately",
        "duration": "6 Months",
        "total_openings": 1,
        "apply_by": "25-01-2025",
    },
    {
        "id": "AICTE_3",
        "title": "DATA SCIENCE INTERN",
        "job_type": "Full Time",
        "company": "Tech Solutions India",
        "posted_date": "01-01-2025",
        "city": "Bangalore",
        "state": "Karnataka",
        "stipend": "15000 /month",
        "start_date": "Immediately",
        "duration": "12 Months",
        "total_openings": 5,
        "apply_by": "15-02-2025",
    },
    {
        "id": "INT001",
        "title": "Software Development Intern",
        "job_type": "Full Time",
        "company": "Tech Corp India",
        "city": "Bangalore",
        "state": "Karnataka",
        "stipend": "25000 /month",
        "start_date": "01-03-2025",
        "duration": "6 Months",
        "total_openings": 25,
        "remaining_slots": 20,
        "is_top_company": True,
    },
    {
        "id": "INT002",
        "title": "Digital Marketing Intern",
        "job_type": "Full Time",
        "company": "Marketing Solutions Ltd",
        "city": "Mumbai",
        "state": "Maharashtra",
        "stipend": "20000 /month",
        "start_date": "15-03-2025",
        "duration": "4 Months",
        "total_openings": 15,
        "remaining_slots": 12,
    },
    {
        "id": "INT003",
        "title": "Financial Analyst Intern",
        "job_type": "Part Time",
        "company": "Finance Hub India",
        "city": "New Delhi",
        "state": "Delhi",
        "stipend": "Unpaid",
        "start_date": "Immediately",
        "duration": "3 Months",
        "total_openings": 10,
        "remaining_slots": 3,
        "is_top_company": True,
    },
]
