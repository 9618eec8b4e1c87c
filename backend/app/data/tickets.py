"""Mock helpdesk ticket rows (export column names, export value formats)."""

MOCK_TICKET_ROWS: list[dict] = [
    {
        "ticket_key": "SH-1001",
        "ticket_title": "Borrower payment not applied to loan 0123456789",
        "ticket_description": "Customer says the ACH payment posted at the bank but shows missing on the loan.",
        "ticket_status": "Request Complete",
        "ticket_priority": "High",
        "project_name": "Servicing Help",
        "assigned_user_name": "Rivera, Maria",
        "assigned_user_email": "mrivera@example.com",
        "ticket_created_at_utc": "2026-08-03T14:12:00Z",
        "ticket_completed_at_utc": "2026-08-04T10:30:00Z",
        "time_to_first_response_in_minutes": 42,
        "time_to_resolution_in_minutes": 1218,
        "is_ticket_complete": "TRUE",
    },
    {
        "ticket_key": "SH-1002",
        "ticket_title": "Escrow shortage analysis request",
        "ticket_description": "Borrower wants to understand the escrow shortage on the annual statement.",
        "ticket_status": "In Progress",
        "ticket_priority": "Medium",
        "project_name": "Servicing Help",
        "assigned_user_name": "Rivera, Maria",
        "assigned_user_email": "mrivera@example.com",
        "ticket_created_at_utc": "2026-08-18T09:05:00Z",
        "ticket_completed_at_utc": "",
        "time_to_first_response_in_minutes": 95,
        "time_to_resolution_in_minutes": "",
        "is_ticket_complete": "FALSE",
    },
    {
        "ticket_key": "SH-1003",
        "ticket_title": "Reset online portal password",
        "ticket_description": "Customer is locked out of the portal after three login attempts.",
        "ticket_status": "Closed",
        "ticket_priority": "Low",
        "project_name": "Servicing Help",
        "assigned_user_name": "Chen, David",
        "assigned_user_email": "dchen@example.com",
        "ticket_created_at_utc": "2026-08-21T16:40:00Z",
        "ticket_completed_at_utc": "2026-08-21T17:10:00Z",
        "time_to_first_response_in_minutes": 5,
        "time_to_resolution_in_minutes": 30,
        "is_ticket_complete": "true",
    },
    {
        "ticket_key": "SEW-201",
        "ticket_title": "Escalated complaint regarding late fee",
        "ticket_description": "Borrower filed a complaint about a late fee after autopay failed. Supervisor requested.",
        "ticket_status": "New",
        "ticket_priority": "Critical",
        "project_name": "Servicing Escalations WG",
        "assigned_user_name": "Okafor, Grace",
        "assigned_user_email": "gokafor@example.com",
        "ticket_created_at_utc": "2026-09-02T13:20:00Z",
        "ticket_completed_at_utc": "",
        "time_to_first_response_in_minutes": 1600,
        "time_to_resolution_in_minutes": "",
        "is_ticket_complete": "FALSE",
    },
    {
        "ticket_key": "SEW-202",
        "ticket_title": "Loan transfer boarding issue - goodbye letter missing",
        "ticket_description": "Loan was transferred from prior servicer but the goodbye letter was never received.",
        "ticket_status": "Assigned",
        "ticket_priority": "High",
        "project_name": "Servicing Escalations WG",
        "assigned_user_name": "Okafor, Grace",
        "assigned_user_email": "gokafor@example.com",
        "ticket_created_at_utc": "2026-09-09T08:45:00Z",
        "ticket_completed_at_utc": "",
        "time_to_first_response_in_minutes": 60,
        "time_to_resolution_in_minutes": "",
        "is_ticket_complete": "FALSE",
    },
    {
        "ticket_key": "SAS-310",
        "ticket_title": "Add borrower to voice authorization",
        "ticket_description": "Please add spouse as authorized third party on the account.",
        "ticket_status": "Request Complete",
        "ticket_priority": "Low",
        "project_name": "ServApp Support",
        "assigned_user_name": "Chen, David",
        "assigned_user_email": "dchen@example.com",
        "ticket_created_at_utc": "2026-09-12T11:00:00Z",
        "ticket_completed_at_utc": "2026-09-13T11:00:00Z",
        "time_to_first_response_in_minutes": 20,
        "time_to_resolution_in_minutes": 1440,
        "is_ticket_complete": "TRUE",
    },
    {
        "ticket_key": "SAS-311",
        "ticket_title": "Payoff statement request",
        "ticket_description": "Title company needs a payoff quote good through month end.",
        "ticket_status": "Request Complete",
        "ticket_priority": "Medium",
        "project_name": "ServApp Support",
        "assigned_user_name": "Patel, Anika",
        "assigned_user_email": "apatel@example.com",
        "ticket_created_at_utc": "2026-09-20T15:30:00Z",
        "ticket_completed_at_utc": "2026-09-21T09:00:00Z",
        "time_to_first_response_in_minutes": 15,
        "time_to_resolution_in_minutes": 1050,
        "is_ticket_complete": "TRUE",
    },
    {
        "ticket_key": "SAS-312",
        "ticket_title": "Insurance declaration page update",
        "ticket_description": "Homeowner changed hazard insurance carrier; new policy attached.",
        "ticket_status": "Reopened",
        "ticket_priority": "Medium",
        "project_name": "ServApp Support",
        "assigned_user_name": "Patel, Anika",
        "assigned_user_email": "apatel@example.com",
        "ticket_created_at_utc": "2026-09-28T10:10:00Z",
        "ticket_completed_at_utc": "",
        "time_to_first_response_in_minutes": 240,
        "time_to_resolution_in_minutes": "",
        "is_ticket_complete": "FALSE",
    },
    {
        "ticket_key": "CMG-50",
        "ticket_title": "Fwd: Borrower letter re: forbearance options",
        "ticket_description": "Forwarded email from borrower asking about hardship and forbearance.",
        "ticket_status": "New",
        "ticket_priority": "High",
        "project_name": "CMG Servicing Oversight",
        "assigned_user_name": "",
        "assigned_user_email": "",
        "ticket_created_at_utc": "2026-10-05T19:25:00Z",
        "ticket_completed_at_utc": "",
        "time_to_first_response_in_minutes": "",
        "time_to_resolution_in_minutes": "",
        "is_ticket_complete": "FALSE",
    },
    {
        "ticket_key": "CMG-51",
        "ticket_title": "Automatic reply: out of office",
        "ticket_description": "Auto reply received from mailbox.",
        "ticket_status": "Closed - Miscategorized",
        "ticket_priority": "Low",
        "project_name": "CMG Servicing Oversight",
        "assigned_user_name": "Chen, David",
        "assigned_user_email": "dchen@example.com",
        "ticket_created_at_utc": "2026-10-06T07:00:00Z",
        "ticket_completed_at_utc": "2026-10-06T07:05:00Z",
        "time_to_first_response_in_minutes": 1,
        "time_to_resolution_in_minutes": 5,
        "is_ticket_complete": "TRUE",
    },
    {
        "ticket_key": "SH-1004",
        "ticket_title": "Question about loan RPM1234567",
        "ticket_description": "Borrower asking general questions about the loan.",
        "ticket_status": "In Progress",
        "ticket_priority": "Critical",
        "project_name": "Servicing Help",
        "assigned_user_name": "Rivera, Maria",
        "assigned_user_email": "mrivera@example.com",
        "ticket_created_at_utc": "2026-10-10T12:00:00Z",
        "ticket_completed_at_utc": "",
        "time_to_first_response_in_minutes": 30,
        "time_to_resolution_in_minutes": "",
        "is_ticket_complete": "FALSE",
    },
    {
        "ticket_key": "SH-1005",
        "ticket_title": "1098 tax form copy",
        "ticket_description": "Customer needs a copy of last year's 1098 mortgage interest statement.",
        "ticket_status": "Request Complete",
        "ticket_priority": "Low",
        "project_name": "Servicing Help",
        "assigned_user_name": "Patel, Anika",
        "assigned_user_email": "apatel@example.com",
        "ticket_created_at_utc": "2026-10-12T14:45:00Z",
        "ticket_completed_at_utc": "2026-10-13T09:15:00Z",
        "time_to_first_response_in_minutes": 12,
        "time_to_resolution_in_minutes": 1110,
        "is_ticket_complete": "TRUE",
    },
    {
        "ticket_key": "ORIG-77",
        "ticket_title": "Rate lock extension",
        "ticket_description": "Origination pipeline request outside servicing.",
        "ticket_status": "New",
        "ticket_priority": "Medium",
        "project_name": "Origination Ops",
        "assigned_user_name": "Lee, Sam",
        "assigned_user_email": "slee@example.com",
        "ticket_created_at_utc": "2026-10-14T10:00:00Z",
        "ticket_completed_at_utc": "",
        "time_to_first_response_in_minutes": 10,
        "time_to_resolution_in_minutes": "",
        "is_ticket_complete": "FALSE",
    },
]
