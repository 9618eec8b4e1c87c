"""Mock call transcripts with attached AI analysis rows."""


def _analysis(agent, agent_score, customer, customer_score, topic, subcategory,
              summary, risk="low", performance=7.5, confidence=0.85):
    return {
        "agent_sentiment": agent,
        "agent_sentiment_score": agent_score,
        "customer_sentiment": customer,
        "customer_sentiment_score": customer_score,
        "ai_discovered_topic": topic,
        "ai_discovered_subcategory": subcategory,
        "topic_confidence": confidence,
        "summary": summary,
        "key_issue": subcategory,
        "escalation_risk": risk,
        "agent_performance": performance,
    }


MOCK_TRANSCRIPT_ROWS: list[dict] = [
    {
        "id": 1,
        "vendor_call_key": "CALL-0001",
        "call_start": "2026-10-01T14:05:00Z",
        "call_end": "2026-10-01T14:12:30Z",
        "duration_seconds": 450,
        "disposition": "Resolved",
        "department": "Customer Service",
        "agent_name": "Maria Rivera",
        "agent_email": "mrivera@example.com",
        "number_of_holds": 0,
        "hold_duration": 0,
        "basic_sentiment": "positive",
        "detected_topics": ["Payment"],
        "messages": [
            {"role": "customer", "text": "Hi, I want to confirm my payment went through for this month."},
            {"role": "agent", "text": "Thank you for calling. I can see the payment posted on October first."},
            {"role": "customer", "text": "Great, thank you so much for the help."},
            {"role": "agent", "text": "You're welcome. Is there anything else I can help with today?"},
        ],
        "analysis": _analysis("positive", 0.8, "positive", 0.7, "Payment Issues",
                              "Payment Confirmation", "Borrower confirmed October payment posted."),
    },
    {
        "id": 2,
        "vendor_call_key": "CALL-0002",
        "call_start": "2026-10-01T15:20:00Z",
        "call_end": "2026-10-01T15:38:00Z",
        "duration_seconds": 1080,
        "disposition": "Escalated",
        "department": "Customer Service",
        "agent_name": "Maria Rivera",
        "agent_email": "mrivera@example.com",
        "number_of_holds": 2,
        "hold_duration": 240,
        "basic_sentiment": "negative",
        "detected_topics": ["Escrow", "Complaint"],
        "messages": [
            {"role": "customer", "text": "My escrow payment went up again and this is ridiculous. I am very frustrated."},
            {"role": "agent", "text": "I understand your frustration. The escrow analysis shows a shortage from the tax increase."},
            {"role": "customer", "text": "I want to speak to a supervisor, this is unacceptable."},
            {"role": "agent", "text": "I will escalate this to my supervisor and transfer you now."},
        ],
        "analysis": _analysis("neutral", 0.1, "negative", -0.7, "Escrow", "Escrow Shortage",
                              "Borrower disputed escrow shortage and requested a supervisor.",
                              risk="high", performance=6.0),
    },
    {
        "id": 3,
        "vendor_call_key": "CALL-0003",
        "call_start": "2026-10-02T09:10:00Z",
        "call_end": "2026-10-02T09:16:00Z",
        "duration_seconds": 360,
        "disposition": "Resolved",
        "department": "Customer Service",
        "agent_name": "Maria Rivera",
        "agent_email": "mrivera@example.com",
        "number_of_holds": 0,
        "hold_duration": 0,
        "basic_sentiment": "positive",
        "detected_topics": ["Account Access"],
        "messages": [
            {"role": "customer", "text": "I can't log in to the website, my password doesn't work."},
            {"role": "agent", "text": "I can help with that. I've sent a password reset link to your email."},
            {"role": "customer", "text": "Got it, that worked. Thanks!"},
        ],
        "analysis": _analysis("positive", 0.6, "positive", 0.5, "Account Access",
                              "Password Reset", "Helped borrower reset portal password."),
    },
    {
        "id": 4,
        "vendor_call_key": "CALL-0004",
        "call_start": "2026-10-03T18:45:00Z",
        "call_end": "2026-10-03T18:55:00Z",
        "duration_seconds": 600,
        "disposition": "Resolved",
        "department": "Customer Service",
        "agent_name": "Maria Rivera",
        "agent_email": "mrivera@example.com",
        "number_of_holds": 1,
        "hold_duration": 60,
        "basic_sentiment": "positive",
        "detected_topics": ["Documents"],
        "messages": [
            {"role": "customer", "text": "I need a copy of my 1098 tax form."},
            {"role": "agent", "text": "Happy to help. I have emailed the 1098 statement to you."},
            {"role": "customer", "text": "Perfect, I appreciate it."},
        ],
        "analysis": _analysis("positive", 0.7, "positive", 0.6, "Document Requests",
                              "Tax Documents", "Sent 1098 to borrower."),
    },
    {
        "id": 5,
        "vendor_call_key": "CALL-0005",
        "call_start": "2026-10-05T13:00:00Z",
        "call_end": "2026-10-05T13:09:00Z",
        "duration_seconds": 540,
        "disposition": "Resolved",
        "department": "Customer Service",
        "agent_name": "Maria Rivera",
        "agent_email": "mrivera@example.com",
        "number_of_holds": 0,
        "hold_duration": 0,
        "basic_sentiment": "neutral",
        "detected_topics": ["Payoff"],
        "messages": [
            {"role": "customer", "text": "What is my payoff amount if I pay off the loan at the end of the month?"},
            {"role": "agent", "text": "I will request a payoff quote and it will be sent within two business days."},
        ],
        "analysis": _analysis("positive", 0.5, "neutral", 0.0, "Loan Information",
                              "Payoff Request", "Requested payoff quote for borrower."),
    },
    {
        "id": 6,
        "vendor_call_key": "CALL-0006",
        "call_start": "2026-10-06T10:30:00Z",
        "call_end": "2026-10-06T10:52:00Z",
        "duration_seconds": 1320,
        "disposition": "Callback",
        "department": "Loss Mitigation",
        "agent_name": "Grace Okafor",
        "agent_email": "gokafor@example.com",
        "number_of_holds": 3,
        "hold_duration": 420,
        "basic_sentiment": "negative",
        "detected_topics": ["Hardship"],
        "messages": [
            {"role": "customer", "text": "I lost my job and I can't make the payment. I'm worried about foreclosure."},
            {"role": "agent", "text": "I'm sorry to hear that. We have forbearance options; I'll send an application."},
            {"role": "customer", "text": "Okay, when will I hear back?"},
            {"role": "agent", "text": "We will call you back within 48 hours once the documents are reviewed."},
        ],
        "analysis": _analysis("neutral", 0.0, "negative", -0.4, "Loan Modifications",
                              "Forbearance", "Borrower requested forbearance after job loss.",
                              risk="medium", performance=7.0),
    },
    {
        "id": 7,
        "vendor_call_key": "CALL-0007",
        "call_start": "2026-10-08T16:15:00Z",
        "call_end": "2026-10-08T16:20:00Z",
        "duration_seconds": 300,
        "disposition": "Resolved",
        "department": "Loss Mitigation",
        "agent_name": "Grace Okafor",
        "agent_email": "gokafor@example.com",
        "number_of_holds": 0,
        "hold_duration": 0,
        "basic_sentiment": "negative",
        "detected_topics": ["Payment"],
        "messages": [
            {"role": "customer", "text": "Why was I charged a late fee? This is wrong."},
            {"role": "agent", "text": "The payment arrived after the grace period, so the fee applies."},
        ],
        "analysis": _analysis("negative", -0.3, "negative", -0.6, "Payment Issues",
                              "Late Fees", "Borrower disputed late fee; agent declined waiver.",
                              risk="medium", performance=4.5),
    },
    {
        "id": 8,
        "vendor_call_key": "CALL-0008",
        "call_start": "2026-10-09T11:40:00Z",
        "call_end": "2026-10-09T11:47:00Z",
        "duration_seconds": 420,
        "disposition": "Resolved",
        "department": "Customer Service",
        "agent_name": "David Chen",
        "agent_email": "dchen@example.com",
        "number_of_holds": 0,
        "hold_duration": 0,
        "basic_sentiment": "positive",
        "detected_topics": ["Insurance"],
        "messages": [
            {"role": "customer", "text": "I changed my homeowners insurance and need to send the new policy."},
            {"role": "agent", "text": "Great, you can upload the declaration page online or fax it to us."},
            {"role": "customer", "text": "Excellent, thanks for the help."},
        ],
        "analysis": _analysis("positive", 0.6, "positive", 0.5, "Escrow",
                              "Insurance Update", "Explained how to submit new insurance policy."),
    },
    {
        "id": 9,
        "vendor_call_key": "CALL-0009",
        "call_start": "2026-10-10T08:05:00Z",
        "call_end": "2026-10-10T08:08:00Z",
        "duration_seconds": 180,
        "disposition": "Abandoned",
        "department": "NULL",
        "agent_name": None,
        "agent_email": None,
        "number_of_holds": None,
        "hold_duration": None,
        "basic_sentiment": "neutral",
        "detected_topics": None,
        "messages": [
            {"role": "customer", "text": "Hello?"},
        ],
        "analysis": None,
    },
]
