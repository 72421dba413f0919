from domain.dtos import CaptionTemplate
from domain.enums import CaptionCategory

_C = CaptionCategory.corporate
_S = CaptionCategory.startup
_T = CaptionCategory.tech
_G = CaptionCategory.generic

# Reworded near-duplicates are intentional variety.
CATALOG = (
    CaptionTemplate("WHEN YOU'RE THE BOSS", "BUT STILL CAN'T FIX THE PRINTER", _C),
    CaptionTemplate("COMPANY VALUES:", "WORK-LIFE BALANCE NOT INCLUDED", _C),
    CaptionTemplate("WE'RE A FAMILY HERE", "THANKSGIVING DINNER OPTIONAL", _C),
    CaptionTemplate("SYNERGY ACHIEVED", "NOBODY KNOWS WHAT IT MEANS", _C),
    CaptionTemplate("HIRING ISN'T EASY", "BUT FIRE IS EASY", _C),

    CaptionTemplate("DISRUPTING THE MARKET", "ONE BUG AT A TIME", _S),
    CaptionTemplate("MOVE FAST AND BREAK THINGS", "MISSION ACCOMPLISHED", _S),
    CaptionTemplate("PIVOT! PIVOT! PIVOT!", "STILL LOST", _S),
    CaptionTemplate("UNICORN STATUS", "MYTHICAL AND OVERVALUED", _S),
    CaptionTemplate("RAISING FUNDS", "DOESN'T MEAN YOU'RE DOING ANYTHING", _S),
    CaptionTemplate("WE'RE BUILDING THE FUTURE", "ONE BUG AT A TIME", _S),

    CaptionTemplate("IT WORKS ON MY MACHINE", "FAMOUS LAST WORDS", _T),
    CaptionTemplate("ARTIFICIAL INTELLIGENCE", "ARTIFICIALLY INTELLIGENT", _T),
    CaptionTemplate("CLOUD COMPUTING", "SOMEONE ELSE'S COMPUTER", _T),
    CaptionTemplate("BLOCKCHAIN EVERYTHING", "PROBLEM SOLVED?", _T),
    CaptionTemplate("AI ASSISTANT", "DOESN'T DO ANYTHING", _T),
    CaptionTemplate("SOFTWARE DEVELOPMENT", "MAY THE SOURCE BE WITH YOU", _T),

    CaptionTemplate("QUARTERLY RESULTS", "EXCEEDED EXPECTATIONS (BARELY)", _G),
    CaptionTemplate("CUSTOMER SERVICE", "PLEASE HOLD... FOREVER", _G),
    CaptionTemplate("BRAND NEW STRATEGY", "SAME AS THE OLD STRATEGY", _G),
    CaptionTemplate("INNOVATION AT ITS FINEST", "CTRL+C, CTRL+V", _G),
    CaptionTemplate("GOING VIRAL", "LIKE A COMPUTER VIRUS", _G),
    CaptionTemplate("MARKET LEADER", "IN A MARKET OF ONE", _G),
    CaptionTemplate("CUSTOMER SATISFACTION", "RESULTS MAY VARY", _G),
    CaptionTemplate("THINKING OUTSIDE THE BOX", "BOX SOLD SEPARATELY", _G),
    CaptionTemplate("BEST PRACTICES", "PRACTICED BY THE BEST", _G),
    CaptionTemplate("SCALABLE SOLUTION", "SCALING DOWN INCLUDED", _G),
    CaptionTemplate("INNOVATION AT ITS FINEST", "CTRL+C, CTRL+V", _G),

    CaptionTemplate("COMPANY VALUES:", "WORK-LIFE BALANCE SOLD SEPARATELY", _C),
    CaptionTemplate("HIRING ISN'T EASY", "BUT FIRING FEELS GREAT", _C),
    CaptionTemplate("MOVE FAST AND BREAK THINGS", "NOW WE HAVE MORE THINGS TO FIX", _S),
    CaptionTemplate("PIVOT! PIVOT! PIVOT!", "STILL HEADING NOWHERE", _S),
    CaptionTemplate("UNICORN STATUS", "MYTHICAL, MAGICAL, OVERVALUED", _S),
    CaptionTemplate("RAISING FUNDS", "DOESN'T MEAN YOU HAVE A PRODUCT", _S),
    CaptionTemplate("WE'RE BUILDING THE FUTURE", "CURRENTLY CRASHING IN BETA", _S),
    CaptionTemplate("ARTIFICIAL INTELLIGENCE", "STILL DOESN'T UNDERSTAND HUMOR", _T),
    CaptionTemplate("QUARTERLY RESULTS", "BEAT EXPECTATIONS BY 0.01%", _G),
    CaptionTemplate("CUSTOMER SERVICE", "PLEASE HOLD FOREVER AND ENJOY THE MUSIC", _G),
    CaptionTemplate("BRAND NEW STRATEGY", "EXACTLY LIKE THE OLD ONE", _G),
    CaptionTemplate("BEST PRACTICES", "AS RECOMMENDED BY PEOPLE WHO DON'T DO IT", _G),
)
